# synthese/tasks.py
"""
Tâches Celery pour le rafraîchissement des synthèses en cache
"""
import logging

from celery import shared_task

from geography.models import Departement
from synthese.services.synthese_service import synthese_service

logger = logging.getLogger(__name__)


@shared_task
def rafraichir_syntheses():
    """
    Tâche périodique: recalcule toutes les synthèses territoriales
    À exécuter toutes les 15 minutes
    """
    total = synthese_service.rafraichir_tout()
    logger.info(f"Rafraîchissement des synthèses: {total} synthèses recalculées")
    return total


@shared_task
def invalider_synthese_departement(code):
    """
    Tâche asynchrone: invalide les synthèses d'un département
    """
    try:
        departement = Departement.objects.get(code=code)
    except Departement.DoesNotExist:
        logger.warning(f"Département {code} introuvable, aucune synthèse invalidée")
        return False

    synthese_service.invalider_departement(departement)
    return True
