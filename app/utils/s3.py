import uuid
import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from app.core.config import settings
from app.core.exceptions import BackendUnavailable, ValidationError


def get_s3_client():
    return boto3.client(
        's3',
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION
    )


def get_image_url(path: str) -> str:
    """Absolute URLs pass through; storage paths resolve against the public products bucket"""
    if path.startswith("http"):
        return path
    base = settings.STORAGE_PUBLIC_URL.rstrip("/")
    return f"{base}/storage/v1/object/public/{settings.STORAGE_BUCKET}/{path}"


def build_object_key(filename: str) -> str:
    extension = filename.rsplit('.', 1)[-1].lower() if filename and '.' in filename else 'jpg'
    return f"{uuid.uuid4()}.{extension}"


def upload_to_storage(file_bytes: bytes, filename: str, content_type: str, s3=None) -> str:
    """Store one product image and return its storage path"""
    allowed = [t.strip() for t in settings.allowed_image_types.split(",")]
    if content_type not in allowed:
        raise ValidationError(f"Unsupported image type: {content_type}")
    if len(file_bytes) > settings.MAX_FILE_SIZE:
        raise ValidationError("Image is too large")

    key = build_object_key(filename)
    try:
        s3 = s3 or get_s3_client()
        s3.put_object(
            Bucket=settings.STORAGE_BUCKET,
            Key=key,
            Body=file_bytes,
            ContentType=content_type
        )
    except NoCredentialsError:
        raise BackendUnavailable("Storage credentials not available")
    except (BotoCoreError, ClientError) as e:
        raise BackendUnavailable(f"Failed to upload image: {e}")

    return key
