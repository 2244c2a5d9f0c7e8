# common/exceptions.py
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class TransitionInvalide(APIException):
    """Transition de workflow non autorisée depuis le statut courant"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Transition de statut non autorisée."
    default_code = 'transition_invalide'


class DonneesIncoherentes(APIException):
    """
    Données saisies incohérentes.

    Porte les erreurs bloquantes et les avertissements. L'enregistrement
    peut être forcé en renvoyant la requête avec forcer=true.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Les données saisies sont incohérentes."
    default_code = 'donnees_incoherentes'

    def __init__(self, erreurs, avertissements=None):
        self.erreurs = list(erreurs)
        self.avertissements = list(avertissements or [])
        super().__init__(detail={
            'erreurs': self.erreurs,
            'avertissements': self.avertissements,
            'forcer': "Renvoyer avec forcer=true pour enregistrer malgré les erreurs.",
        })


class DocumentDuplique(APIException):
    """Un document identique (même empreinte) existe déjà"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Ce document a déjà été téléversé."
    default_code = 'document_duplique'


class TeleversementEchoue(APIException):
    """Le service de stockage des documents a refusé le fichier"""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Le téléversement du document a échoué."
    default_code = 'televersement_echoue'


def custom_exception_handler(exc, context):
    """Handler d'exceptions personnalisé pour DRF"""

    # Appeler le handler par défaut
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(f"Erreur non gérée dans {view.__class__.__name__}: {exc}", exc_info=exc)
        return None

    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        message = str(detail)
    else:
        message = str(getattr(exc, 'default_detail', exc))

    response.data = {
        'error': True,
        'message': message,
        'details': response.data if isinstance(response.data, dict) else {'detail': response.data}
    }

    return response

