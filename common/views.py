# common/views.py
from django.http import JsonResponse


def _erreur(message, status):
    return JsonResponse({'error': True, 'message': message, 'details': {}}, status=status)


def bad_request(request, exception=None):
    return _erreur("Requête invalide.", 400)


def permission_denied(request, exception=None):
    return _erreur("Accès refusé.", 403)


def page_not_found(request, exception=None):
    return _erreur("Ressource introuvable.", 404)


def server_error(request):
    return _erreur("Erreur interne du serveur.", 500)
