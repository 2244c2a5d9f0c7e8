# accounts/signals.py
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from accounts.models import (
    AuditLog, User, UtilisateurArrondissement, UtilisateurBureauVote, UtilisateurDepartement
)

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def user_post_save(sender, instance, created, **kwargs):
    """Log de création d'un utilisateur"""
    if created:
        AuditLog.log(
            action='USER_CREATE',
            description=f"Création de l'utilisateur {instance.nom_complet}",
            target=instance,
            details={'email': instance.email, 'role': instance.role}
        )


@receiver(post_save, sender=UtilisateurDepartement)
@receiver(post_save, sender=UtilisateurArrondissement)
@receiver(post_save, sender=UtilisateurBureauVote)
def affectation_post_save(sender, instance, created, **kwargs):
    """Trace chaque nouvelle affectation territoriale"""
    if not created:
        return

    logger.info(f"Affectation créée: {instance}")
    AuditLog.log(
        user=instance.affecte_par,
        action='AFFECTATION',
        description=f"Affectation de {instance.user.nom_complet}: {instance}",
        target=instance.user,
        details={'type': sender.__name__}
    )
