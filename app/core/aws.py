import boto3
from boto3.session import Session
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import ClientError
from fastapi import Request

from app.core.config import get_settings

settings = get_settings()


def _build_session() -> Session:
    return boto3.Session(
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_region,
    )


def build_s3_client() -> BaseClient:
    session = _build_session()
    return session.client("s3", config=Config(signature_version="s3v4"))


def get_s3_client(request: Request) -> BaseClient:
    s3_client = getattr(request.app.state, "s3_client", None)
    if s3_client is None:
        raise RuntimeError("S3 client is not configured on application state")
    return s3_client


def presign_document_upload(
    s3_client: BaseClient,
    key: str,
    content_type: str,
    expires: int = 900,
) -> str:
    return s3_client.generate_presigned_url(
        ClientMethod="put_object",
        Params={
            "Bucket": settings.aws_s3_bucket,
            "Key": key,
            "ContentType": content_type,
            "ServerSideEncryption": "AES256",
        },
        ExpiresIn=expires,
        HttpMethod="PUT",
    )


def object_url(key: str) -> str:
    return (
        f"https://{settings.aws_s3_bucket}.s3.{settings.aws_region}.amazonaws.com/{key}"
    )


def object_exists(s3_client: BaseClient, key: str) -> bool:
    try:
        s3_client.head_object(Bucket=settings.aws_s3_bucket, Key=key)
    except ClientError as exc:
        code = exc.response.get("Error", {}).get("Code")
        if code in {"404", "NoSuchKey", "NotFound"}:
            return False
        raise
    return True
