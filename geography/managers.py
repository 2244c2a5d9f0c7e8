# geography/managers.py
from django.db import models


class DepartementQuerySet(models.QuerySet):
    """QuerySet personnalisé pour Departement"""

    def par_region(self, region):
        return self.filter(region=region)


class ArrondissementQuerySet(models.QuerySet):
    """QuerySet personnalisé pour Arrondissement"""

    def par_region(self, region):
        return self.filter(departement__region=region)

    def par_departement(self, departement):
        return self.filter(departement=departement)


class BureauVoteQuerySet(models.QuerySet):
    """QuerySet personnalisé pour BureauVote"""

    def par_region(self, region):
        """Filtre par région"""
        return self.filter(arrondissement__departement__region=region)

    def par_departement(self, departement):
        """Filtre par département"""
        return self.filter(arrondissement__departement=departement)

    def par_arrondissement(self, arrondissement):
        return self.filter(arrondissement=arrondissement)


class BureauVoteManager(models.Manager):
    """Manager personnalisé pour BureauVote"""

    def get_queryset(self):
        return BureauVoteQuerySet(self.model, using=self._db).select_related(
            'arrondissement__departement__region'
        )

    def par_region(self, region):
        return self.get_queryset().par_region(region)

    def par_departement(self, departement):
        return self.get_queryset().par_departement(departement)

    def par_arrondissement(self, arrondissement):
        return self.get_queryset().par_arrondissement(arrondissement)
