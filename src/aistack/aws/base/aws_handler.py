import time
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from aistack.aws.base.aws_handler_interface import BaseAWSHandler
from aistack.aws.base.aws_resource import ResourceStatus, ResourceType, StackResource
from aistack.aws.base.stack_plan import STACK_STEPS, StackStep, validate_plan
from aistack.aws.cloudwatch.cloudwatch_handler import CloudWatchHandler
from aistack.aws.cloudwatch.cloudwatch_model import MetricAlarm
from aistack.aws.exceptions.aws_exceptions import AWSError, StackProvisioningError, classify_error
from aistack.aws.s3.s3_handler import S3Handler
from aistack.aws.secrets.secrets_handler import SecretsHandler
from aistack.aws.vpc.vpc_handler import VpcHandler
from aistack.aws.vpc_endpoint.vpc_endpoint_handler import VpcEndpointHandler
from aistack.config.stack_config.stack_config_model import StackConfig
from aistack.helpers.logger import setup_logging
from aistack.helpers.utils import get_error_code
from aistack.provider.run_model import ProvisioningRun, RunStatus, StepResult, StepStatus

logger = setup_logging()


class StackHandler:
    """
    Main handler for a stack run. Executes the fixed step plan against the service-specific
    handlers, keeps a ledger of everything it creates, and releases that ledger, newest first,
    when a step fails.
    """

    def __init__(
        self,
        config: StackConfig,
        vpc_handler: VpcHandler,
        endpoint_handler: VpcEndpointHandler,
        s3_handler: S3Handler,
        secrets_handler: SecretsHandler,
        cloudwatch_handler: CloudWatchHandler,
    ):
        """
        :param config: The validated stack configuration.
        """
        validate_plan(STACK_STEPS)

        self.config = config
        self.vpc_handler = vpc_handler
        self.endpoint_handler = endpoint_handler
        self.s3_handler = s3_handler
        self.secrets_handler = secrets_handler
        self.cloudwatch_handler = cloudwatch_handler

        self.handlers: List[BaseAWSHandler] = [
            vpc_handler,
            endpoint_handler,
            s3_handler,
            secrets_handler,
            cloudwatch_handler,
        ]

        self._step_methods: Dict[int, Callable[[ProvisioningRun, Dict[str, Any]], Dict[str, Any]]] = {
            1: self._create_vpc,
            2: self._create_bucket,
            3: self._create_internet_gateway,
            4: self._attach_internet_gateway,
            5: self._create_vpc_endpoint,
            6: self._register_connection_notification,
            7: self._modify_endpoint_route_table,
            8: self._describe_connection_state,
            9: self._create_secret,
            10: self._create_metric_alarm,
            11: self._teardown,
        }

    def provision(self, dry_run: bool = False) -> ProvisioningRun:
        """
        Run every step of the plan in order.

        :param dry_run: Only recorded on the run; the caller decides where clients point.
        :return: The completed run.
        :raises StackProvisioningError: If a step fails. Resources created so far are released first.
        """
        run = ProvisioningRun(
            stackName=self.config.stack_name,
            region=self.config.aws.region,
            dryRun=dry_run,
        )
        run.startTime = int(time.time())
        run.update_status(RunStatus.RUNNING, "Provisioning started.")
        logger.info(f"Starting run {run.runId} for stack '{run.stackName}' in {run.region}.")

        # Identifiers handed from one step to the next
        state: Dict[str, Any] = {}

        for step in STACK_STEPS:
            try:
                self._execute_step(run, step, state)
            except Exception as e:
                self._fail(run, step, e)

        run.endTime = int(time.time())
        held = [str(r) for r in run.resources if r.status != ResourceStatus.RELEASED]
        run.update_status(
            RunStatus.COMPLETE,
            f"All {len(STACK_STEPS)} steps completed; {len(held)} resource(s) left allocated.",
        )
        logger.info(f"Run {run.runId} complete. Resources left allocated: {held or 'none'}.")
        return run

    def _execute_step(self, run: ProvisioningRun, step: StackStep, state: Dict[str, Any]) -> None:
        result = StepResult(number=step.number, name=step.name, status=StepStatus.RUNNING)
        run.steps.append(result)
        started = time.monotonic()
        logger.info(f"Step {step.number}: {step.description}")

        try:
            skip_reason = self._skip_reason(step)
            if skip_reason:
                result.status = StepStatus.SKIPPED
                result.message = skip_reason
                logger.warning(f"Step {step.number} skipped: {skip_reason}")
                return

            result.outputs = self._step_methods[step.number](run, state) or {}
            result.status = StepStatus.SUCCEEDED
            logger.info(f"Step {step.number} succeeded.", outputs=result.outputs)
        except Exception as e:
            result.status = StepStatus.FAILED
            result.message = str(e)
            raise
        finally:
            result.durationMs = int((time.monotonic() - started) * 1000)

    def _skip_reason(self, step: StackStep) -> Optional[str]:
        if step.number == 6 and not self.config.endpoint.connection_notification_arn:
            return "No connection notification topic configured."
        return None

    def _fail(self, run: ProvisioningRun, step: StackStep, error: Exception) -> None:
        """
        Release everything the run still holds, then raise StackProvisioningError for the failed step.
        """
        logger.error(f"Step {step.number} ({step.name}) failed: {error}", exc_info=True)

        release_failures = self.rollback(run)

        run.endTime = int(time.time())
        if release_failures:
            run.update_status(
                RunStatus.FAILED,
                f"Step {step.number} failed; {len(release_failures)} resource(s) could not be released.",
            )
        else:
            run.update_status(
                RunStatus.ROLLED_BACK,
                f"Step {step.number} failed; all resources created by the run were released.",
            )

        error_class = classify_error(error)
        error_code = None
        if isinstance(error, ClientError):
            error_code = get_error_code(error)
        elif isinstance(error, AWSError):
            error_code = error.error_code

        raise StackProvisioningError(
            f"Step {step.number} ({step.description}) failed: {error}",
            step_number=step.number,
            step_name=step.name,
            cause_category=error_class.category if error_class else "internal",
            error_code=error_code,
            release_failures=release_failures,
            run=run,
        ) from error

    def rollback(self, run: ProvisioningRun) -> List[Dict[str, Any]]:
        """
        Release every resource the run still holds, newest first.

        A failed release is logged and recorded on the resource; the remaining releases still run.

        :return: One entry per resource that could not be released.
        """
        failures = []
        held = run.held_resources()
        if held:
            logger.warning(f"Releasing {len(held)} resource(s) created by run {run.runId}.")

        for resource in held:
            try:
                self.release_resource(resource)
            except Exception as e:
                logger.error(f"Failed to release {resource}: {e}")
                resource.update_status(ResourceStatus.RELEASE_FAILED, str(e))
                failures.append({
                    "type": resource.resourceType.value,
                    "id": resource.resourceId,
                    "error": str(e),
                })
        return failures

    def release_resource(self, resource: StackResource) -> None:
        """
        Release one ledger resource through the handler that owns its type.

        :raises ValueError: If no handler can release the resource type.
        """
        handler = self._get_handler(resource)
        handler.release(resource)
        resource.update_status(ResourceStatus.RELEASED, "Released.")

    def _get_handler(self, resource: StackResource) -> BaseAWSHandler:
        for handler in self.handlers:
            if handler.can_release(resource):
                return handler
        raise ValueError(f"Unsupported resource type: {resource.resourceType}")

    def _get_common_tags(self, run: ProvisioningRun) -> Dict[str, str]:
        """
        Generate common tags that are applied across all resources.

        :param run: The run creating the resources.
        :return: A dictionary of common tags.
        """
        tags = dict(self.config.tags)
        tags.update({
            "StackName": run.stackName,
            "RunId": run.runId,
            "ManagedBy": "aistack",
        })
        return tags

    # Steps

    def _create_vpc(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        vpc = self.vpc_handler.create_vpc(self.config.network.cidr_block, tags=self._get_common_tags(run))
        run.record_resource(ResourceType.VPC, vpc.vpcId)
        state["vpc_id"] = vpc.vpcId
        return {"vpcId": vpc.vpcId}

    def _create_bucket(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        bucket = self.s3_handler.create_bucket(self.config.storage.bucket_name)
        run.record_resource(ResourceType.BUCKET, bucket.name)
        state["bucket_name"] = bucket.name
        return {"bucketName": bucket.name}

    def _create_internet_gateway(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        igw = self.vpc_handler.create_internet_gateway(tags=self._get_common_tags(run))
        run.record_resource(ResourceType.INTERNET_GATEWAY, igw.internetGatewayId)
        state["internet_gateway_id"] = igw.internetGatewayId
        return {"internetGatewayId": igw.internetGatewayId}

    def _attach_internet_gateway(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        igw_id, vpc_id = state["internet_gateway_id"], state["vpc_id"]
        self.vpc_handler.attach_internet_gateway(igw_id, vpc_id)
        run.record_resource(ResourceType.GATEWAY_ATTACHMENT, igw_id, parent_id=vpc_id)
        return {"internetGatewayId": igw_id, "vpcId": vpc_id}

    def _create_vpc_endpoint(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        endpoint_config = self.config.endpoint
        endpoint = self.endpoint_handler.create_vpc_endpoint(
            vpc_id=state["vpc_id"],
            service_name=endpoint_config.resolve_service_name(self.config.aws.region),
            endpoint_type=endpoint_config.endpoint_type,
            tags=self._get_common_tags(run),
        )
        run.record_resource(ResourceType.VPC_ENDPOINT, endpoint.vpcEndpointId, parent_id=state["vpc_id"])
        state["vpc_endpoint_id"] = endpoint.vpcEndpointId
        return {"vpcEndpointId": endpoint.vpcEndpointId, "serviceName": endpoint.serviceName}

    def _register_connection_notification(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        endpoint_config = self.config.endpoint
        notification = self.endpoint_handler.create_connection_notification(
            vpc_endpoint_id=state["vpc_endpoint_id"],
            notification_arn=endpoint_config.connection_notification_arn,
            connection_events=list(endpoint_config.connection_events),
        )
        run.record_resource(
            ResourceType.CONNECTION_NOTIFICATION,
            notification.connectionNotificationId,
            parent_id=state["vpc_endpoint_id"],
        )
        return {"connectionNotificationId": notification.connectionNotificationId}

    def _modify_endpoint_route_table(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        endpoint_id = state["vpc_endpoint_id"]
        route_table_id = self.vpc_handler.get_main_route_table_id(state["vpc_id"])
        self.endpoint_handler.add_route_tables(endpoint_id, [route_table_id])
        run.record_resource(ResourceType.ROUTE_TABLE_ASSOCIATION, route_table_id, parent_id=endpoint_id)
        return {"routeTableId": route_table_id, "vpcEndpointId": endpoint_id}

    def _describe_connection_state(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        connection_state = self.endpoint_handler.get_connection_state(state["vpc_endpoint_id"])
        run.connectionState = connection_state
        return {"connectionState": connection_state}

    def _create_secret(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        secret_config = self.config.secret
        secret = self.secrets_handler.create_secret(
            name=secret_config.name,
            description=secret_config.description,
            secret_string=secret_config.secret_string,
            tags=self._get_common_tags(run),
        )
        run.record_resource(ResourceType.SECRET, secret.name)
        state["secret_name"] = secret.name
        return {"secretName": secret.name, "secretArn": secret.arn}

    def _create_metric_alarm(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        alarm = MetricAlarm.from_config(self.config.alarm, tags=self._get_common_tags(run))
        self.cloudwatch_handler.create_metric_alarm(alarm)
        run.record_resource(ResourceType.METRIC_ALARM, alarm.alarmName)
        state["alarm_name"] = alarm.alarmName
        return {"alarmName": alarm.alarmName}

    def _teardown(self, run: ProvisioningRun, state: Dict[str, Any]) -> Dict[str, Any]:
        released = []
        for resource_type, resource_id in (
            (ResourceType.METRIC_ALARM, state["alarm_name"]),
            (ResourceType.SECRET, state["secret_name"]),
            (ResourceType.GATEWAY_ATTACHMENT, state["internet_gateway_id"]),
            (ResourceType.INTERNET_GATEWAY, state["internet_gateway_id"]),
        ):
            resource = run.find_resource(resource_type, resource_id)
            self.release_resource(resource)
            released.append(str(resource))

        if self.config.teardown.full:
            logger.info("Full teardown enabled, releasing the remaining resources.")
            for resource in run.held_resources():
                self.release_resource(resource)
                released.append(str(resource))

        return {"released": released}
