"""Tests for the S3 bucket handler."""

import boto3
import pytest

from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.exceptions.aws_exceptions import ResourceConflictError
from aistack.aws.s3.s3_handler import S3Handler


@pytest.mark.aws
class TestS3Handler:
    """Bucket calls against moto."""

    def test_create_bucket_in_default_region(self, aws_mocks, s3_client):
        handler = S3Handler("us-east-1")

        bucket = handler.create_bucket("ai-data")

        assert bucket.name == "ai-data"
        assert bucket.region == "us-east-1"
        assert handler.bucket_exists("ai-data")
        assert s3_client.get_bucket_location(Bucket="ai-data")["LocationConstraint"] is None

    def test_create_bucket_outside_default_region_sets_location(self, aws_mocks):
        handler = S3Handler("eu-west-1")

        handler.create_bucket("ai-data-eu")

        client = boto3.client("s3", region_name="eu-west-1")
        assert client.get_bucket_location(Bucket="ai-data-eu")["LocationConstraint"] == "eu-west-1"

    def test_existing_bucket_is_not_adopted(self, aws_mocks, s3_client):
        s3_client.create_bucket(Bucket="ai-data")
        s3_client.put_object(Bucket="ai-data", Key="model.bin", Body=b"weights")

        with pytest.raises(ResourceConflictError) as exc_info:
            S3Handler("us-east-1").create_bucket("ai-data")

        assert exc_info.value.error_code == "BucketAlreadyOwnedByYou"
        assert s3_client.get_object(Bucket="ai-data", Key="model.bin")["Body"].read() == b"weights"

    def test_bucket_exists_is_false_for_unknown_bucket(self, aws_mocks):
        assert not S3Handler("us-east-1").bucket_exists("no-such-bucket")

    def test_release_deletes_bucket(self, aws_mocks):
        handler = S3Handler("us-east-1")
        handler.create_bucket("ai-data")

        handler.release(StackResource(ResourceType.BUCKET, "ai-data"))

        assert not handler.bucket_exists("ai-data")

    def test_release_rejects_other_types(self, aws_mocks):
        with pytest.raises(ValueError):
            S3Handler("us-east-1").release(StackResource(ResourceType.VPC, "vpc-123"))
