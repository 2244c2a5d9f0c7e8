# geography/models.py
from django.core.validators import MinValueValidator
from django.db import models

from geography.managers import (
    ArrondissementQuerySet, BureauVoteManager, DepartementQuerySet
)


class BaseGeoModel(models.Model):
    """Modèle abstrait de base pour les entités géographiques"""
    code = models.IntegerField(primary_key=True)
    libelle = models.CharField(max_length=200)
    abbreviation = models.CharField(max_length=20, blank=True)
    description = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['libelle']

    def __str__(self):
        return f"{self.code} - {self.libelle}"


class Region(BaseGeoModel):
    """Région administrative - Niveau 1"""
    chef_lieu = models.CharField(max_length=200, blank=True)

    class Meta(BaseGeoModel.Meta):
        db_table = 'geo_regions'
        verbose_name = 'Région'
        verbose_name_plural = 'Régions'


class Departement(BaseGeoModel):
    """Département - Niveau 2"""
    region = models.ForeignKey(Region, on_delete=models.PROTECT, related_name='departements')
    chef_lieu = models.CharField(max_length=200, blank=True)

    objects = DepartementQuerySet.as_manager()

    class Meta(BaseGeoModel.Meta):
        db_table = 'geo_departements'
        verbose_name = 'Département'
        verbose_name_plural = 'Départements'


class Arrondissement(BaseGeoModel):
    """Arrondissement (commune) - Niveau 3"""
    departement = models.ForeignKey(
        Departement,
        on_delete=models.PROTECT,
        related_name='arrondissements'
    )
    # Dénormalisé depuis le département
    region = models.ForeignKey(
        Region,
        on_delete=models.PROTECT,
        related_name='arrondissements',
        editable=False
    )

    objects = ArrondissementQuerySet.as_manager()

    class Meta(BaseGeoModel.Meta):
        db_table = 'geo_arrondissements'
        verbose_name = 'Arrondissement'
        verbose_name_plural = 'Arrondissements'

    def save(self, *args, **kwargs):
        self.region_id = self.departement.region_id
        super().save(*args, **kwargs)


class BureauVote(models.Model):
    """Bureau de vote - Niveau 4"""
    code = models.IntegerField(primary_key=True)
    designation = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    arrondissement = models.ForeignKey(
        Arrondissement,
        on_delete=models.PROTECT,
        related_name='bureaux_vote'
    )

    latitude = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)
    longitude = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)
    altitude = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    effectif = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Nombre d'électeurs attendus"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BureauVoteManager()

    class Meta:
        db_table = 'geo_bureaux_vote'
        ordering = ['designation']
        verbose_name = 'Bureau de vote'
        verbose_name_plural = 'Bureaux de vote'

    def __str__(self):
        return f"{self.code} - {self.designation}"

    @property
    def departement(self):
        return self.arrondissement.departement

    @property
    def region(self):
        return self.arrondissement.departement.region
