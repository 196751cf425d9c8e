import os
import boto3

from botocore.config import Config

main_boto_region = os.environ.get('MAIN_BOTO_REGION', 'eu-central-1')

# Every backend call is attempted exactly once, failures surface to the caller.
aws_config = Config(retries={'total_max_attempts': 1}, region_name=main_boto_region)
aws_config_ddb = Config(retries={'total_max_attempts': 1}, region_name=os.environ.get('AWS_REGION', 'eu-central-1'))

# Cognito Client.
# Identity store for restaurant owners and riders.
cognito_client = boto3.client('cognito-idp', config=aws_config)

# S3 Client.
# Public bucket with the restaurant images.
s3_client = boto3.client('s3', config=aws_config)
