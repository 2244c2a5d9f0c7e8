# participation/models.py
from django.core.validators import MinValueValidator
from django.db import models

from common.models import TimestampedModel, WorkflowModel
from common.utils import champs_derives, taux_abstention, taux_participation
from participation.managers import ParticipationQuerySet
from participation.services.coherence import (
    valider_donnees_participation, valider_participation_commune
)


class ControleCoherenceMixin(models.Model):
    """Drapeaux de contrôle alimentés à chaque sauvegarde"""
    has_incoherence = models.BooleanField(default=False)
    erreurs_detectees = models.JSONField(default=list, blank=True)
    avertissements = models.JSONField(default=list, blank=True)

    class Meta:
        abstract = True

    def controler(self):
        raise NotImplementedError

    def validate_coherence(self):
        """Valide la cohérence des données saisies"""
        resultat = self.controler()
        self.erreurs_detectees = resultat.erreurs
        self.avertissements = resultat.avertissements
        self.has_incoherence = not resultat.est_valide
        return resultat


class ParticipationBureauVote(ControleCoherenceMixin, TimestampedModel):
    """Participation relevée sur le PV d'un bureau de vote"""
    bureau_vote = models.OneToOneField(
        'geography.BureauVote',
        on_delete=models.PROTECT,
        related_name='participation'
    )
    nombre_inscrit = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_votant = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    bulletin_nul = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    suffrage_exprime = models.IntegerField(null=True, blank=True)
    taux_participation = models.FloatField(null=True, blank=True)

    objects = ParticipationQuerySet.as_manager()

    class Meta:
        db_table = 'participation_bureaux_vote'
        ordering = ['bureau_vote_id']
        verbose_name = 'Participation bureau de vote'
        verbose_name_plural = 'Participations bureaux de vote'

    def __str__(self):
        return f"Participation {self.bureau_vote_id}"

    def save(self, *args, **kwargs):
        derives = champs_derives(self.donnees())
        self.suffrage_exprime = derives['suffrage_exprime']
        self.taux_participation = derives['taux_participation']

        self.validate_coherence()

        super().save(*args, **kwargs)

    def donnees(self):
        return {
            'nombre_inscrit': self.nombre_inscrit,
            'nombre_votant': self.nombre_votant,
            'bulletin_nul': self.bulletin_nul,
            'suffrage_exprime': self.suffrage_exprime,
            'taux_participation': self.taux_participation,
        }

    def controler(self):
        return valider_donnees_participation(self.donnees())

    @property
    def territoire(self):
        return self.bureau_vote


class ParticipationCommune(ControleCoherenceMixin, WorkflowModel):
    """Participation agrégée par commune (arrondissement)"""
    arrondissement = models.ForeignKey(
        'geography.Arrondissement',
        on_delete=models.PROTECT,
        related_name='participations'
    )
    nombre_bureaux = models.IntegerField(null=True, blank=True)
    nombre_inscrits = models.IntegerField(null=True, blank=True)
    nombre_votants = models.IntegerField(null=True, blank=True)
    taux_participation = models.FloatField(null=True, blank=True)
    bulletins_nuls = models.IntegerField(null=True, blank=True)
    suffrages_valables = models.IntegerField(null=True, blank=True)
    taux_abstention = models.FloatField(null=True, blank=True)

    objects = ParticipationQuerySet.as_manager()

    class Meta:
        db_table = 'participation_communes'
        ordering = ['-date_creation']
        verbose_name = 'Participation commune'
        verbose_name_plural = 'Participations communes'

    def __str__(self):
        return f"Participation commune {self.arrondissement_id} ({self.get_statut_display()})"

    def save(self, *args, **kwargs):
        if self.nombre_votants is not None and self.nombre_inscrits:
            self.taux_participation = taux_participation(self.nombre_votants, self.nombre_inscrits)
            self.taux_abstention = taux_abstention(self.nombre_votants, self.nombre_inscrits)

        self.validate_coherence()

        super().save(*args, **kwargs)

    def donnees(self):
        return {
            'arrondissement': self.arrondissement_id,
            'nombre_bureaux': self.nombre_bureaux,
            'nombre_inscrits': self.nombre_inscrits,
            'nombre_votants': self.nombre_votants,
            'bulletins_nuls': self.bulletins_nuls,
            'suffrages_valables': self.suffrages_valables,
        }

    def controler(self):
        return valider_participation_commune(self.donnees())

    @property
    def territoire(self):
        return self.arrondissement


class ParticipationDepartement(ControleCoherenceMixin, WorkflowModel):
    """Participation départementale saisie depuis le PV de la commission"""
    departement = models.ForeignKey(
        'geography.Departement',
        on_delete=models.PROTECT,
        related_name='participations'
    )
    nombre_bureau_vote = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_inscrit = models.IntegerField(default=0, validators=[MinValueValidator(0)])

    # Dépouillement des enveloppes
    nombre_enveloppe_urnes = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_enveloppe_bulletins_differents = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_bulletin_electeur_identifiable = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_bulletin_enveloppes_signes = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_enveloppe_non_elecam = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_bulletin_non_elecam = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_bulletin_sans_enveloppe = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_enveloppe_vide = models.IntegerField(default=0, validators=[MinValueValidator(0)])

    nombre_suffrages_valable = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    nombre_votant = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    bulletin_nul = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    suffrage_exprime = models.IntegerField(null=True, blank=True)
    taux_participation = models.FloatField(null=True, blank=True)

    objects = ParticipationQuerySet.as_manager()

    class Meta:
        db_table = 'participation_departements'
        ordering = ['-date_creation']
        verbose_name = 'Participation département'
        verbose_name_plural = 'Participations départements'

    CHAMPS_SAISIE = [
        'nombre_bureau_vote', 'nombre_inscrit', 'nombre_enveloppe_urnes',
        'nombre_enveloppe_bulletins_differents', 'nombre_bulletin_electeur_identifiable',
        'nombre_bulletin_enveloppes_signes', 'nombre_enveloppe_non_elecam',
        'nombre_bulletin_non_elecam', 'nombre_bulletin_sans_enveloppe',
        'nombre_enveloppe_vide', 'nombre_suffrages_valable', 'nombre_votant',
        'bulletin_nul', 'suffrage_exprime', 'taux_participation',
    ]

    def __str__(self):
        return f"Participation département {self.departement_id} ({self.get_statut_display()})"

    def save(self, *args, **kwargs):
        derives = champs_derives(self.donnees())
        self.suffrage_exprime = derives['suffrage_exprime']
        self.taux_participation = derives['taux_participation']

        self.validate_coherence()

        super().save(*args, **kwargs)

    def donnees(self):
        return {champ: getattr(self, champ) for champ in self.CHAMPS_SAISIE}

    def controler(self):
        return valider_donnees_participation(self.donnees())

    @property
    def territoire(self):
        return self.departement
