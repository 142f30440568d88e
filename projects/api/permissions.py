"""
Projects API Permissions - Resource-loading gates for views.

``load_project`` and ``load_owned_project`` fetch a project named in the
URL, enforce the relevant gate and cache it on ``request.resource`` so the
handler reuses the loaded row.
"""

from .. import gates, services


def load_project(request, project_id):
    """Fetch a project or 404."""
    cached = getattr(request, 'resource', None)
    if cached is not None and str(cached.pk) == str(project_id):
        return cached

    project = services.get_project(project_id)
    request.resource = project
    return project


def load_owned_project(request, project_id, reason=gates.NO_ACCESS):
    """Fetch a project or 404, then 403 unless the caller is its buyer."""
    project = load_project(request, project_id)
    gates.enforce(gates.is_project_buyer(request.user, project, reason=reason))
    return project
