# resultats/models.py
from django.core.validators import MinValueValidator
from django.db import models, transaction

from common.models import TimestampedModel, WorkflowModel
from participation.models import ControleCoherenceMixin, ParticipationBureauVote
from participation.services.coherence import valider_coherence_resultat, valider_vote
from resultats.managers import ResultatDepartementQuerySet


class PartiPolitique(models.Model):
    """Parti politique en lice"""
    designation = models.CharField(max_length=200)
    abbreviation = models.CharField(max_length=20, blank=True)
    description = models.TextField(blank=True)
    couleur = models.CharField(max_length=7, blank=True, help_text="Couleur hexadécimale")
    logo = models.URLField(blank=True)

    class Meta:
        db_table = 'partis_politiques'
        ordering = ['designation']
        verbose_name = 'Parti politique'
        verbose_name_plural = 'Partis politiques'

    def __str__(self):
        return self.abbreviation or self.designation


class Candidat(models.Model):
    """Candidat à l'élection"""
    nom = models.CharField(max_length=100)
    prenom = models.CharField(max_length=100, blank=True)
    parti = models.ForeignKey(
        PartiPolitique,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='candidats'
    )
    numero_ordre = models.IntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'candidats'
        ordering = ['numero_ordre', 'nom']
        verbose_name = 'Candidat'
        verbose_name_plural = 'Candidats'

    def __str__(self):
        return f"{self.prenom} {self.nom}".strip()


# ============================================================
# RÉSULTATS
# ============================================================

class ResultatBureauVote(ControleCoherenceMixin, TimestampedModel):
    """Voix obtenues par un parti dans un bureau de vote"""
    bureau_vote = models.ForeignKey(
        'geography.BureauVote',
        on_delete=models.PROTECT,
        related_name='resultats'
    )
    parti = models.ForeignKey(PartiPolitique, on_delete=models.PROTECT, related_name='resultats_bureau')
    nombre_vote = models.IntegerField(default=0)

    class Meta:
        db_table = 'resultats_bureaux_vote'
        unique_together = ['bureau_vote', 'parti']
        ordering = ['bureau_vote_id', '-nombre_vote']
        verbose_name = 'Résultat bureau de vote'
        verbose_name_plural = 'Résultats bureaux de vote'

    def __str__(self):
        return f"{self.bureau_vote_id} - {self.parti}: {self.nombre_vote}"

    def save(self, *args, **kwargs):
        self.validate_coherence()
        super().save(*args, **kwargs)

    def autres_votes(self):
        autres = ResultatBureauVote.objects.filter(bureau_vote_id=self.bureau_vote_id)
        if self.pk:
            autres = autres.exclude(pk=self.pk)
        return list(autres.values_list('nombre_vote', flat=True))

    def controler(self):
        return controler_vote_bureau(self.bureau_vote_id, self.nombre_vote, self.autres_votes())

    @property
    def territoire(self):
        return self.bureau_vote


def controler_vote_bureau(bureau_vote_id, nombre_vote, autres_votes):
    """Contrôle un nombre de voix contre les autres partis et la participation du bureau"""
    resultat = valider_vote(nombre_vote, autres_votes)

    participation = ParticipationBureauVote.objects.filter(bureau_vote_id=bureau_vote_id).first()
    if participation is not None:
        resultat = resultat.fusionner(
            valider_coherence_resultat(nombre_vote, participation.donnees(), autres_votes)
        )
    return resultat


class ResultatDepartement(WorkflowModel):
    """Voix obtenues par un parti dans un département"""
    departement = models.ForeignKey(
        'geography.Departement',
        on_delete=models.PROTECT,
        related_name='resultats'
    )
    parti = models.ForeignKey(PartiPolitique, on_delete=models.PROTECT, related_name='resultats_departement')
    nombre_vote = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    pourcentage = models.FloatField(default=0)

    objects = ResultatDepartementQuerySet.as_manager()

    class Meta:
        db_table = 'resultats_departements'
        unique_together = ['departement', 'parti']
        ordering = ['departement_id', '-nombre_vote']
        verbose_name = 'Résultat département'
        verbose_name_plural = 'Résultats départements'

    def __str__(self):
        return f"{self.departement_id} - {self.parti}: {self.nombre_vote}"

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)

        # Les pourcentages de tous les partis du département dépendent du total
        ResultatDepartement.objects.recalculer_pourcentages(self.departement_id)
        self.refresh_from_db(fields=['pourcentage'])

    @property
    def territoire(self):
        return self.departement


# ============================================================
# REDRESSEMENTS
# ============================================================

class RedressementBureauVote(WorkflowModel):
    """
    Correction des chiffres de participation d'un bureau de vote.

    Les valeurs initiales sont relevées à la création ; l'approbation
    reporte les valeurs redressées sur la participation du bureau.
    """
    bureau_vote = models.ForeignKey(
        'geography.BureauVote',
        on_delete=models.PROTECT,
        related_name='redressements'
    )
    nombre_inscrit_initial = models.IntegerField(null=True, blank=True)
    nombre_inscrit_redresse = models.IntegerField(null=True, blank=True)
    nombre_votant_initial = models.IntegerField(null=True, blank=True)
    nombre_votant_redresse = models.IntegerField(null=True, blank=True)
    bulletin_nul_initial = models.IntegerField(null=True, blank=True)
    bulletin_nul_redresse = models.IntegerField(null=True, blank=True)
    suffrage_exprime_initial = models.IntegerField(null=True, blank=True)
    suffrage_exprime_redresse = models.IntegerField(null=True, blank=True)
    raison_redressement = models.TextField()
    date_redressement = models.DateTimeField(auto_now_add=True)

    CHAMPS = ['nombre_inscrit', 'nombre_votant', 'bulletin_nul', 'suffrage_exprime']

    class Meta:
        db_table = 'redressements_bureaux_vote'
        ordering = ['-date_redressement']
        verbose_name = 'Redressement bureau de vote'
        verbose_name_plural = 'Redressements bureaux de vote'

    def __str__(self):
        return f"Redressement bureau {self.bureau_vote_id} ({self.get_statut_display()})"

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.relever_valeurs_initiales()
        super().save(*args, **kwargs)

    def relever_valeurs_initiales(self):
        participation = ParticipationBureauVote.objects.filter(bureau_vote_id=self.bureau_vote_id).first()
        if participation is None:
            return
        for champ in self.CHAMPS:
            if getattr(self, f"{champ}_initial") is None:
                setattr(self, f"{champ}_initial", getattr(participation, champ))

    def recalcule_exprimes(self):
        """Exprimés déduits des votants et nuls quand seuls ceux-ci sont redressés"""
        return self.suffrage_exprime_redresse is None and (
            self.nombre_votant_redresse is not None or self.bulletin_nul_redresse is not None
        )

    def valeurs_redressees(self):
        """Participation du bureau après application du redressement"""
        valeurs = {}
        for champ in self.CHAMPS:
            redresse = getattr(self, f"{champ}_redresse")
            valeurs[champ] = redresse if redresse is not None else getattr(self, f"{champ}_initial")
        if self.recalcule_exprimes():
            votants = valeurs['nombre_votant']
            valeurs['suffrage_exprime'] = (
                votants - (valeurs['bulletin_nul'] or 0) if votants is not None else None
            )
        return valeurs

    @transaction.atomic
    def appliquer(self, user):
        participation, _ = ParticipationBureauVote.objects.get_or_create(
            bureau_vote_id=self.bureau_vote_id,
            defaults={'code_createur': user}
        )
        for champ, valeur in self.valeurs_redressees().items():
            if valeur is not None:
                setattr(participation, champ, valeur)
        if self.recalcule_exprimes():
            # Recalculés par la participation à partir des votants et nuls
            participation.suffrage_exprime = None
        participation.code_modificateur = user
        participation.save()
        return participation

    @property
    def territoire(self):
        return self.bureau_vote


class RedressementCandidat(WorkflowModel):
    """Correction du nombre de voix d'un parti dans un bureau de vote"""
    resultat = models.ForeignKey(
        ResultatBureauVote,
        on_delete=models.PROTECT,
        related_name='redressements'
    )
    nombre_vote_initial = models.IntegerField(null=True, blank=True)
    nombre_vote_redresse = models.IntegerField(validators=[MinValueValidator(0)])
    raison_redressement = models.TextField()
    date_redressement = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'redressements_candidats'
        ordering = ['-date_redressement']
        verbose_name = 'Redressement candidat'
        verbose_name_plural = 'Redressements candidats'

    def __str__(self):
        return f"Redressement résultat {self.resultat_id} ({self.get_statut_display()})"

    def save(self, *args, **kwargs):
        if self._state.adding and self.nombre_vote_initial is None:
            self.nombre_vote_initial = self.resultat.nombre_vote
        super().save(*args, **kwargs)

    @transaction.atomic
    def appliquer(self, user):
        resultat = self.resultat
        resultat.nombre_vote = self.nombre_vote_redresse
        resultat.code_modificateur = user
        resultat.save()
        return resultat

    @property
    def territoire(self):
        return self.resultat.bureau_vote


# ============================================================
# PROCÈS-VERBAUX SCANNÉS
# ============================================================

class BasePv(TimestampedModel):
    libelle = models.CharField(max_length=255, blank=True)
    url_pv = models.URLField(max_length=500)
    public_id = models.CharField(max_length=255)
    hash_file = models.CharField(max_length=64, unique=True, help_text="Empreinte SHA-256")
    nom_fichier = models.CharField(max_length=255, blank=True)
    taille = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True

    def __str__(self):
        return self.libelle or self.nom_fichier


class PvArrondissement(BasePv):
    """PV scanné de la commission d'arrondissement"""
    arrondissement = models.ForeignKey(
        'geography.Arrondissement',
        on_delete=models.PROTECT,
        related_name='pvs'
    )

    class Meta:
        db_table = 'pv_arrondissements'
        ordering = ['-date_creation']
        verbose_name = 'PV arrondissement'
        verbose_name_plural = 'PV arrondissements'

    @property
    def territoire(self):
        return self.arrondissement


class PvDepartement(BasePv):
    """PV scanné de la commission départementale"""
    departement = models.ForeignKey(
        'geography.Departement',
        on_delete=models.PROTECT,
        related_name='pvs'
    )

    class Meta:
        db_table = 'pv_departements'
        ordering = ['-date_creation']
        verbose_name = 'PV département'
        verbose_name_plural = 'PV départements'

    @property
    def territoire(self):
        return self.departement
