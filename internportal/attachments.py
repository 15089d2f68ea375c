from dataclasses import dataclass

from django.conf import settings
from django.http import HttpResponse
from django.template.defaultfilters import filesizeformat
from django.utils.http import content_disposition_header
from rest_framework.exceptions import NotFound, ValidationError


@dataclass(frozen=True)
class Attachment:
    """An optional binary attachment stored inline with its owning row."""

    data: bytes
    mime_type: str
    size: int
    name: str = ''

    @classmethod
    def from_upload(cls, upload, max_size=None):
        """Read an uploaded file into an Attachment, or return None when nothing was sent."""
        if upload is None:
            return None
        limit = max_size or settings.PORTAL['MAX_ATTACHMENT_SIZE']
        if upload.size > limit:
            raise ValidationError({
                getattr(upload, 'field_name', None) or 'file': [f'File size must not exceed {filesizeformat(limit)}.'],
            })
        data = upload.read()
        return cls(
            data=data,
            mime_type=upload.content_type or 'application/octet-stream',
            size=len(data),
            name=upload.name or '',
        )


def attachment_response(attachment, download=True, fallback_name='attachment'):
    """Stream a stored blob back with its recorded mime type."""
    if attachment is None:
        raise NotFound('File not found.')

    response = HttpResponse(bytes(attachment.data), content_type=attachment.mime_type or 'application/octet-stream')
    response['Content-Length'] = len(attachment.data)
    if download:
        # Quotes are escaped and non-ASCII names go out as filename*=utf-8''...
        response['Content-Disposition'] = content_disposition_header(True, attachment.name or fallback_name)
    return response
