from typing import Dict, List, Optional

from botocore.exceptions import ClientError

from aistack.aws.base.aws_handler_interface import BaseAWSHandler
from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.vpc_endpoint.vpc_endpoint_model import ConnectionNotification, VpcEndpoint
from aistack.helpers.logger import setup_logging
from aistack.helpers.utils import tag_specifications

logger = setup_logging()


class VpcEndpointHandler(BaseAWSHandler):
    """
    Handler for VPC endpoints, their connection notifications and route table associations.
    """

    resource_types = (
        ResourceType.VPC_ENDPOINT,
        ResourceType.CONNECTION_NOTIFICATION,
        ResourceType.ROUTE_TABLE_ASSOCIATION,
    )

    def __init__(self, region_name: str, **kwargs):
        super().__init__(region_name, **kwargs)
        self.ec2_client = self._create_client("ec2")

    def create_vpc_endpoint(
        self,
        vpc_id: str,
        service_name: str,
        endpoint_type: str = "Gateway",
        tags: Optional[Dict[str, str]] = None,
    ) -> VpcEndpoint:
        """
        Create a VPC endpoint for an AWS service.

        :param vpc_id: The VPC the endpoint belongs to.
        :param service_name: Endpoint service, e.g. "com.amazonaws.us-east-1.s3".
        :param endpoint_type: "Gateway" or "Interface".
        :param tags: Tags to apply at creation.
        :return: The created endpoint.
        """
        try:
            response = self.ec2_client.create_vpc_endpoint(
                VpcId=vpc_id,
                ServiceName=service_name,
                VpcEndpointType=endpoint_type,
                TagSpecifications=tag_specifications("vpc-endpoint", tags),
            )
            endpoint = VpcEndpoint.from_describe_vpc_endpoints(response["VpcEndpoint"])
            logger.info(f"Created {endpoint_type} endpoint '{endpoint.vpcEndpointId}' for {service_name} in VPC '{vpc_id}'.")
            return endpoint
        except ClientError as e:
            logger.error(f"Failed to create endpoint for {service_name} in VPC '{vpc_id}': {e}")
            raise

    def delete_vpc_endpoint(self, vpc_endpoint_id: str) -> None:
        try:
            response = self.ec2_client.delete_vpc_endpoints(VpcEndpointIds=[vpc_endpoint_id])
        except ClientError as e:
            logger.error(f"Failed to delete endpoint '{vpc_endpoint_id}': {e}")
            raise

        unsuccessful = response.get("Unsuccessful", []) or []
        if unsuccessful:
            error = unsuccessful[0].get("Error", {})
            raise RuntimeError(
                f"Failed to delete endpoint {vpc_endpoint_id}: {error.get('Code', 'unknown')} {error.get('Message', '')}".strip()
            )
        logger.info(f"Deleted endpoint '{vpc_endpoint_id}'.")

    def create_connection_notification(
        self,
        vpc_endpoint_id: str,
        notification_arn: str,
        connection_events: List[str],
    ) -> ConnectionNotification:
        """
        Register an SNS topic for connection events on an endpoint.

        :param vpc_endpoint_id: The endpoint to watch.
        :param notification_arn: SNS topic ARN that receives the events.
        :param connection_events: Events to notify on (e.g. ["Accept"]).
        :return: The created connection notification.
        """
        try:
            response = self.ec2_client.create_vpc_endpoint_connection_notification(
                VpcEndpointId=vpc_endpoint_id,
                ConnectionNotificationArn=notification_arn,
                ConnectionEvents=connection_events,
            )
            notification = ConnectionNotification.from_describe_connection_notifications(
                response["ConnectionNotification"]
            )
            logger.info(
                f"Registered connection notification '{notification.connectionNotificationId}' "
                f"for endpoint '{vpc_endpoint_id}' on events {connection_events}."
            )
            return notification
        except ClientError as e:
            logger.error(f"Failed to register connection notification for endpoint '{vpc_endpoint_id}': {e}")
            raise

    def delete_connection_notification(self, connection_notification_id: str) -> None:
        try:
            response = self.ec2_client.delete_vpc_endpoint_connection_notifications(
                ConnectionNotificationIds=[connection_notification_id]
            )
        except ClientError as e:
            logger.error(f"Failed to delete connection notification '{connection_notification_id}': {e}")
            raise

        unsuccessful = response.get("Unsuccessful", []) or []
        if unsuccessful:
            error = unsuccessful[0].get("Error", {})
            raise RuntimeError(
                f"Failed to delete connection notification {connection_notification_id}: "
                f"{error.get('Code', 'unknown')} {error.get('Message', '')}".strip()
            )
        logger.info(f"Deleted connection notification '{connection_notification_id}'.")

    def add_route_tables(self, vpc_endpoint_id: str, route_table_ids: List[str]) -> None:
        """
        Associate route tables with a gateway endpoint so the service is routed through it.
        """
        try:
            self.ec2_client.modify_vpc_endpoint(VpcEndpointId=vpc_endpoint_id, AddRouteTableIds=route_table_ids)
            logger.info(f"Added route tables {route_table_ids} to endpoint '{vpc_endpoint_id}'.")
        except ClientError as e:
            logger.error(f"Failed to add route tables {route_table_ids} to endpoint '{vpc_endpoint_id}': {e}")
            raise

    def remove_route_tables(self, vpc_endpoint_id: str, route_table_ids: List[str]) -> None:
        try:
            self.ec2_client.modify_vpc_endpoint(VpcEndpointId=vpc_endpoint_id, RemoveRouteTableIds=route_table_ids)
            logger.info(f"Removed route tables {route_table_ids} from endpoint '{vpc_endpoint_id}'.")
        except ClientError as e:
            logger.error(f"Failed to remove route tables {route_table_ids} from endpoint '{vpc_endpoint_id}': {e}")
            raise

    def describe_vpc_endpoint(self, vpc_endpoint_id: str) -> VpcEndpoint:
        try:
            response = self.ec2_client.describe_vpc_endpoints(VpcEndpointIds=[vpc_endpoint_id])
        except ClientError as e:
            logger.error(f"Failed to describe endpoint '{vpc_endpoint_id}': {e}")
            raise

        endpoints = response.get("VpcEndpoints", [])
        if not endpoints:
            raise ValueError(f"Endpoint {vpc_endpoint_id} not found.")
        return VpcEndpoint.from_describe_vpc_endpoints(endpoints[0])

    def get_connection_state(self, vpc_endpoint_id: str) -> str:
        """
        Read the connection state of an endpoint as seen from the consumer VPC.

        :param vpc_endpoint_id: The endpoint to inspect.
        :return: The endpoint state, e.g. "available" or "pending".
        """
        endpoint = self.describe_vpc_endpoint(vpc_endpoint_id)
        logger.info(f"Endpoint '{vpc_endpoint_id}' connection state: {endpoint.state}.")
        return endpoint.state

    def release(self, resource: StackResource) -> None:
        if resource.resourceType == ResourceType.ROUTE_TABLE_ASSOCIATION:
            self.remove_route_tables(resource.parentId, [resource.resourceId])
        elif resource.resourceType == ResourceType.CONNECTION_NOTIFICATION:
            self.delete_connection_notification(resource.resourceId)
        elif resource.resourceType == ResourceType.VPC_ENDPOINT:
            self.delete_vpc_endpoint(resource.resourceId)
        else:
            raise ValueError(f"{self.__class__.__name__} cannot release {resource}")
