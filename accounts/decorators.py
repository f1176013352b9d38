# accounts/decorators.py
from functools import wraps

from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.shortcuts import redirect


def recruiter_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect('login')
        if not request.user.is_recruiter():
            raise PermissionDenied("Recruiter access required.")
        return view_func(request, *args, **kwargs)
    return _wrapped


def api_login_required(view_func):
    """
    JSON flavour of login_required: answers 401 instead of redirecting to the login page.
    """
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Unauthorized'}, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped
