from typing import Dict, Optional

from botocore.exceptions import ClientError

from aistack.aws.base.aws_handler_interface import BaseAWSHandler
from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.vpc.vpc_model import InternetGateway, Vpc
from aistack.helpers.logger import setup_logging
from aistack.helpers.utils import paginate, tag_specifications

logger = setup_logging()


class VpcHandler(BaseAWSHandler):
    """
    Handler for the VPC and its internet gateway.
    """

    resource_types = (
        ResourceType.VPC,
        ResourceType.INTERNET_GATEWAY,
        ResourceType.GATEWAY_ATTACHMENT,
    )

    def __init__(self, region_name: str, **kwargs):
        super().__init__(region_name, **kwargs)
        self.ec2_client = self._create_client("ec2")

    def create_vpc(self, cidr_block: str, tags: Optional[Dict[str, str]] = None) -> Vpc:
        """
        Create a VPC.

        :param cidr_block: IPv4 CIDR block of the VPC.
        :param tags: Tags to apply at creation.
        :return: The created VPC.
        """
        try:
            response = self.ec2_client.create_vpc(
                CidrBlock=cidr_block,
                TagSpecifications=tag_specifications("vpc", tags),
            )
            vpc = Vpc.from_describe_vpcs(response["Vpc"])
            logger.info(f"Created VPC '{vpc.vpcId}' with CIDR {cidr_block}.")
            return vpc
        except ClientError as e:
            logger.error(f"Failed to create VPC with CIDR {cidr_block}: {e}")
            raise

    def delete_vpc(self, vpc_id: str) -> None:
        try:
            self.ec2_client.delete_vpc(VpcId=vpc_id)
            logger.info(f"Deleted VPC '{vpc_id}'.")
        except ClientError as e:
            logger.error(f"Failed to delete VPC '{vpc_id}': {e}")
            raise

    def create_internet_gateway(self, tags: Optional[Dict[str, str]] = None) -> InternetGateway:
        """
        Create an internet gateway. It is not attached to anything yet.

        :param tags: Tags to apply at creation.
        :return: The created internet gateway.
        """
        try:
            response = self.ec2_client.create_internet_gateway(
                TagSpecifications=tag_specifications("internet-gateway", tags),
            )
            igw = InternetGateway.from_describe_internet_gateways(response["InternetGateway"])
            logger.info(f"Created Internet Gateway '{igw.internetGatewayId}'.")
            return igw
        except ClientError as e:
            logger.error(f"Failed to create Internet Gateway: {e}")
            raise

    def attach_internet_gateway(self, internet_gateway_id: str, vpc_id: str) -> None:
        try:
            self.ec2_client.attach_internet_gateway(InternetGatewayId=internet_gateway_id, VpcId=vpc_id)
            logger.info(f"Attached Internet Gateway '{internet_gateway_id}' to VPC '{vpc_id}'.")
        except ClientError as e:
            logger.error(f"Failed to attach Internet Gateway '{internet_gateway_id}' to VPC '{vpc_id}': {e}")
            raise

    def detach_internet_gateway(self, internet_gateway_id: str, vpc_id: str) -> None:
        try:
            self.ec2_client.detach_internet_gateway(InternetGatewayId=internet_gateway_id, VpcId=vpc_id)
            logger.info(f"Detached Internet Gateway '{internet_gateway_id}' from VPC '{vpc_id}'.")
        except ClientError as e:
            logger.error(f"Failed to detach Internet Gateway '{internet_gateway_id}' from VPC '{vpc_id}': {e}")
            raise

    def delete_internet_gateway(self, internet_gateway_id: str) -> None:
        try:
            self.ec2_client.delete_internet_gateway(InternetGatewayId=internet_gateway_id)
            logger.info(f"Deleted Internet Gateway '{internet_gateway_id}'.")
        except ClientError as e:
            logger.error(f"Failed to delete Internet Gateway '{internet_gateway_id}': {e}")
            raise

    def get_main_route_table_id(self, vpc_id: str) -> str:
        """
        Look up the main route table of a VPC.

        :param vpc_id: The VPC to inspect.
        :return: The route table ID.
        :raises ValueError: If the VPC has no main route table.
        """
        try:
            route_tables = paginate(
                self.ec2_client.describe_route_tables,
                "RouteTables",
                Filters=[
                    {"Name": "vpc-id", "Values": [vpc_id]},
                    {"Name": "association.main", "Values": ["true"]},
                ],
            )
        except ClientError as e:
            logger.error(f"Failed to describe route tables of VPC '{vpc_id}': {e}")
            raise

        if not route_tables:
            raise ValueError(f"No main route table found for VPC {vpc_id}.")

        route_table_id = route_tables[0]["RouteTableId"]
        logger.info(f"Main route table of VPC '{vpc_id}' is '{route_table_id}'.")
        return route_table_id

    def release(self, resource: StackResource) -> None:
        if resource.resourceType == ResourceType.GATEWAY_ATTACHMENT:
            self.detach_internet_gateway(resource.resourceId, resource.parentId)
        elif resource.resourceType == ResourceType.INTERNET_GATEWAY:
            self.delete_internet_gateway(resource.resourceId)
        elif resource.resourceType == ResourceType.VPC:
            self.delete_vpc(resource.resourceId)
        else:
            raise ValueError(f"{self.__class__.__name__} cannot release {resource}")
