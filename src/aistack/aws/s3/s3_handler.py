from botocore.exceptions import ClientError

from aistack.aws.base.aws_handler_interface import BaseAWSHandler
from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.exceptions.aws_exceptions import ResourceConflictError
from aistack.aws.s3.s3_model import Bucket
from aistack.helpers.logger import setup_logging

logger = setup_logging()

# us-east-1 rejects an explicit location constraint
DEFAULT_BUCKET_REGION = "us-east-1"


class S3Handler(BaseAWSHandler):
    """
    Handler for S3 buckets.
    """

    resource_types = (ResourceType.BUCKET,)

    def __init__(self, region_name: str, **kwargs):
        super().__init__(region_name, **kwargs)
        self.s3_client = self._create_client("s3")

    def create_bucket(self, bucket_name: str) -> Bucket:
        """
        Create a bucket in the handler's region.

        In us-east-1 CreateBucket succeeds on a bucket the caller already owns, so an existing
        bucket is rejected up front.

        :param bucket_name: Globally unique bucket name.
        :return: The created bucket.
        :raises ResourceConflictError: If the bucket already exists.
        """
        if self.bucket_exists(bucket_name):
            logger.error(f"Bucket '{bucket_name}' already exists; refusing to adopt it.")
            raise ResourceConflictError(f"Bucket {bucket_name} already exists", error_code="BucketAlreadyOwnedByYou")

        kwargs = {"Bucket": bucket_name}
        if self.region_name != DEFAULT_BUCKET_REGION:
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region_name}

        try:
            response = self.s3_client.create_bucket(**kwargs)
            bucket = Bucket(name=bucket_name, region=self.region_name, location=response.get("Location"))
            logger.info(f"Created bucket '{bucket_name}' in {self.region_name}.")
            return bucket
        except ClientError as e:
            logger.error(f"Failed to create bucket '{bucket_name}': {e}")
            raise

    def bucket_exists(self, bucket_name: str) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=bucket_name)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] in ("404", "NoSuchBucket", "NotFound"):
                return False
            raise

    def delete_bucket(self, bucket_name: str) -> None:
        try:
            self.s3_client.delete_bucket(Bucket=bucket_name)
            logger.info(f"Deleted bucket '{bucket_name}'.")
        except ClientError as e:
            logger.error(f"Failed to delete bucket '{bucket_name}': {e}")
            raise

    def release(self, resource: StackResource) -> None:
        if resource.resourceType != ResourceType.BUCKET:
            raise ValueError(f"{self.__class__.__name__} cannot release {resource}")
        self.delete_bucket(resource.resourceId)
