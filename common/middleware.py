# common/middleware.py
import re

from accounts.models import AuditLog
from common.utils import get_client_ip


class AuditMiddleware:
    """Middleware pour logger les actions importantes"""

    # Actions de workflow, téléversements et redressements
    chemins_audites = [
        re.compile(r'^/api/.+/(valider|approuver|rejeter)/$'),
        re.compile(r'^/api/.+/bulk/(valider|approuver|rejeter)/$'),
        re.compile(r'^/api/pv-(arrondissement|departement)/'),
        re.compile(r'^/api/redressements-(bureau|candidat)/'),
    ]

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        user = getattr(request, 'user', None)
        if request.method == 'POST' and user is not None and user.is_authenticated:
            path = request.path
            if response.status_code < 400 and any(p.match(path) for p in self.chemins_audites):
                AuditLog.log(
                    user=user,
                    action='HTTP_POST',
                    description=f"POST {path} ({response.status_code})",
                    ip_address=get_client_ip(request)
                )

        return response
