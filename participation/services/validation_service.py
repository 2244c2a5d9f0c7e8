# participation/services/validation_service.py
import logging

from django.core.exceptions import ObjectDoesNotExist
from django.db import transaction

from common.exceptions import TransitionInvalide

logger = logging.getLogger(__name__)


class ValidationService:
    """
    Circuit de validation des saisies (WorkflowModel).

    EN_ATTENTE → VALIDE → APPROUVE, rejet possible depuis EN_ATTENTE ou
    VALIDE. L'approbation d'une saisie qui sait s'appliquer (redressement)
    déclenche son application dans la même transaction.
    """

    @transaction.atomic
    def valider(self, objet, user, commentaire=None):
        """Valider une saisie"""
        objet.transitionner('VALIDER', user, commentaire=commentaire)
        objet.save()

        logger.info(f"{objet} validé par {user.email}")
        return objet

    @transaction.atomic
    def approuver(self, objet, user, commentaire=None):
        """Approuver une saisie validée"""
        objet.transitionner('APPROUVER', user, commentaire=commentaire)
        objet.save()

        if hasattr(objet, 'appliquer'):
            objet.appliquer(user)

        logger.info(f"{objet} approuvé par {user.email}")
        return objet

    @transaction.atomic
    def rejeter(self, objet, user, motif_rejet, commentaire=None):
        """Rejeter une saisie"""
        if not motif_rejet:
            raise ValueError("Le motif de rejet est obligatoire")

        objet.transitionner('REJETER', user, commentaire=commentaire, motif_rejet=motif_rejet)
        objet.save()

        logger.info(f"{objet} rejeté par {user.email}: {motif_rejet}")
        return objet

    @transaction.atomic
    def corriger(self, objet, user):
        """Une saisie rejetée puis modifiée repart en attente"""
        historique = objet.remettre_en_attente(user)
        if historique is not None:
            objet.save()
            logger.info(f"{objet} corrigé par {user.email}, retour en attente")
        return objet

    # ========== TRAITEMENTS EN MASSE ==========

    def traiter_en_masse(self, methode, queryset, ids, user, **kwargs):
        """
        Applique une transition à plusieurs saisies.

        Chaque saisie est traitée dans sa propre transaction : un échec
        n'annule pas les succès précédents.
        """
        succes = []
        echecs = []

        for pk in ids:
            try:
                objet = queryset.get(pk=pk)
                methode(objet, user, **kwargs)
                succes.append(pk)
            except ObjectDoesNotExist:
                echecs.append({'id': pk, 'erreur': "Saisie introuvable ou hors périmètre"})
            except TransitionInvalide as e:
                echecs.append({'id': pk, 'erreur': str(e.detail)})
            except ValueError as e:
                echecs.append({'id': pk, 'erreur': str(e)})

        logger.info(
            f"Traitement en masse {methode.__name__} par {user.email}: "
            f"{len(succes)} succès, {len(echecs)} échecs"
        )
        return {'succes': succes, 'echecs': echecs}

    def bulk_valider(self, queryset, ids, user, commentaire=None):
        return self.traiter_en_masse(self.valider, queryset, ids, user, commentaire=commentaire)

    def bulk_approuver(self, queryset, ids, user, commentaire=None):
        return self.traiter_en_masse(self.approuver, queryset, ids, user, commentaire=commentaire)

    def bulk_rejeter(self, queryset, ids, user, motif_rejet, commentaire=None):
        if not motif_rejet:
            raise ValueError("Le motif de rejet est obligatoire")
        return self.traiter_en_masse(
            self.rejeter, queryset, ids, user, motif_rejet=motif_rejet, commentaire=commentaire
        )


# Instance singleton
validation_service = ValidationService()
