# jobs/utils.py
import os
import time
import uuid

from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename


def resume_upload_name(filename, now=None):
    """
    Storage name for an uploaded resume: uploads/<epoch-millis>-<safe filename>.
    """
    millis = int((now if now is not None else time.time()) * 1000)
    base = get_valid_filename(os.path.basename(filename or 'resume')) or 'resume'
    return os.path.join('uploads', f"{millis}-{base}")


def store_resume_file(uploaded_file):
    """
    Save the uploaded resume to the default storage and return its public URL.
    Rewinds the file first in case a form already read it.
    """
    try:
        uploaded_file.seek(0)
    except (AttributeError, OSError):
        pass
    saved_name = default_storage.save(resume_upload_name(uploaded_file.name), uploaded_file)
    return default_storage.url(saved_name)


def parse_uuid(value):
    """
    UUID from a client supplied id, or None when it is not one.
    """
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def skills_to_text(skills):
    return ', '.join(s for s in (skills or []) if s)
