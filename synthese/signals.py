# synthese/signals.py
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from participation.models import ParticipationBureauVote
from resultats.models import (
    RedressementBureauVote, RedressementCandidat, ResultatBureauVote, ResultatDepartement,
)
from synthese.services.synthese_service import synthese_service

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=ParticipationBureauVote)
@receiver([post_save, post_delete], sender=ResultatBureauVote)
@receiver([post_save, post_delete], sender=RedressementBureauVote)
def invalider_synthese_bureau(sender, instance, **kwargs):
    """Une saisie de bureau modifie toutes les synthèses qui l'englobent"""
    synthese_service.invalider_bureau(instance.bureau_vote)


@receiver([post_save, post_delete], sender=RedressementCandidat)
def invalider_synthese_redressement_candidat(sender, instance, **kwargs):
    synthese_service.invalider_bureau(instance.resultat.bureau_vote)


@receiver([post_save, post_delete], sender=ResultatDepartement)
def invalider_synthese_resultat_departement(sender, instance, **kwargs):
    synthese_service.invalider_departement(instance.departement)
