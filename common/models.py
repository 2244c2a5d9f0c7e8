# common/models.py
from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils import timezone

from common.exceptions import TransitionInvalide


class TimestampedModel(models.Model):
    """Colonnes d'audit communes à toutes les saisies"""
    code_createur = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    date_creation = models.DateTimeField(auto_now_add=True)
    code_modificateur = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    date_modification = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class WorkflowModel(TimestampedModel):
    """Saisie soumise au circuit de validation"""

    STATUT_CHOICES = [
        ('EN_ATTENTE', 'En attente de validation'),
        ('VALIDE', 'Validé'),
        ('APPROUVE', 'Approuvé'),
        ('REJETE', 'Rejeté'),
    ]

    # action -> (statuts de départ autorisés, statut d'arrivée)
    TRANSITIONS = {
        'VALIDER': (('EN_ATTENTE',), 'VALIDE'),
        'APPROUVER': (('VALIDE',), 'APPROUVE'),
        'REJETER': (('EN_ATTENTE', 'VALIDE'), 'REJETE'),
    }

    statut = models.CharField(max_length=20, choices=STATUT_CHOICES, default='EN_ATTENTE')
    validateur = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    date_validation = models.DateTimeField(null=True, blank=True)
    motif_rejet = models.TextField(blank=True, null=True)
    commentaires_validation = models.TextField(blank=True, null=True)

    class Meta:
        abstract = True

    def peut_transitionner(self, action):
        depart, _ = self.TRANSITIONS[action]
        return self.statut in depart

    def transitionner(self, action, user, commentaire=None, motif_rejet=None):
        """
        Applique une transition de workflow et l'historise.

        Lève TransitionInvalide si le statut courant ne permet pas l'action.
        Ne sauvegarde pas l'objet lui-même.
        """
        if not self.peut_transitionner(action):
            raise TransitionInvalide(
                f"Impossible de {action.lower()} une saisie au statut {self.get_statut_display()}."
            )

        ancien_statut = self.statut
        _, self.statut = self.TRANSITIONS[action]
        self.validateur = user
        self.date_validation = timezone.now()
        if commentaire:
            self.commentaires_validation = commentaire
        if action == 'REJETER':
            self.motif_rejet = motif_rejet

        return HistoriqueValidation.objects.create(
            objet=self,
            action=action,
            ancien_statut=ancien_statut,
            nouveau_statut=self.statut,
            utilisateur=user,
            commentaire=commentaire or '',
            motif_rejet=motif_rejet or '',
        )

    def remettre_en_attente(self, user):
        """Une saisie rejetée repart en attente dès qu'elle est corrigée"""
        if self.statut != 'REJETE':
            return None

        self.statut = 'EN_ATTENTE'
        self.motif_rejet = None
        self.date_validation = None
        self.validateur = None

        return HistoriqueValidation.objects.create(
            objet=self,
            action='CORRIGER',
            ancien_statut='REJETE',
            nouveau_statut='EN_ATTENTE',
            utilisateur=user,
        )

    @property
    def historique(self):
        return HistoriqueValidation.objects.pour(self)


class HistoriqueValidationQuerySet(models.QuerySet):

    def pour(self, objet):
        return self.filter(
            content_type=ContentType.objects.get_for_model(objet),
            object_id=objet.pk
        )


class HistoriqueValidation(models.Model):
    """Trace de chaque changement de statut d'une saisie"""

    ACTION_CHOICES = [
        ('VALIDER', 'Validation'),
        ('APPROUVER', 'Approbation'),
        ('REJETER', 'Rejet'),
        ('CORRIGER', 'Correction après rejet'),
    ]

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    objet = GenericForeignKey('content_type', 'object_id')

    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    ancien_statut = models.CharField(max_length=20)
    nouveau_statut = models.CharField(max_length=20)
    utilisateur = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='historique_validations'
    )
    commentaire = models.TextField(blank=True)
    motif_rejet = models.TextField(blank=True)
    date_action = models.DateTimeField(auto_now_add=True)

    objects = HistoriqueValidationQuerySet.as_manager()

    class Meta:
        db_table = 'historique_validations'
        ordering = ['-date_action', '-id']
        verbose_name = 'Historique de validation'
        verbose_name_plural = 'Historiques de validation'
        indexes = [
            models.Index(fields=['content_type', 'object_id']),
        ]

    def __str__(self):
        return f"{self.action} {self.ancien_statut} → {self.nouveau_statut}"
