# interview/utils.py
import os
from io import BytesIO

from django.conf import settings
from django.contrib.staticfiles import finders
from django.template.loader import render_to_string
from xhtml2pdf import pisa


def link_callback(uri, rel):
    """
    Map static/media URIs in the invitation template to filesystem paths for xhtml2pdf.
    Anything that does not resolve to a local file is handed back unchanged.
    """
    if uri.startswith(settings.MEDIA_URL):
        path = os.path.join(settings.MEDIA_ROOT, uri[len(settings.MEDIA_URL):])
    elif uri.startswith(settings.STATIC_URL):
        path = finders.find(uri[len(settings.STATIC_URL):])
        if isinstance(path, (list, tuple)):
            path = path[0] if path else None
    else:
        return uri
    if not path or not os.path.isfile(path):
        return uri
    return path


def render_invitation_pdf(interview, template_src='interview/invitation_pdf.html'):
    """
    Render the interview invitation to PDF bytes, or None when pisa reports errors.
    """
    html = render_to_string(template_src, {
        'interview': interview,
        'application': interview.application,
        'job': interview.application.job,
        'candidate': interview.candidate,
        'scheduler': interview.scheduler,
    })
    result = BytesIO()
    pdf = pisa.CreatePDF(BytesIO(html.encode('utf-8')), dest=result, link_callback=link_callback)
    if pdf.err:
        return None
    return result.getvalue()
