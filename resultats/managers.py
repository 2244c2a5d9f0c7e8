# resultats/managers.py
from django.db import models

from common.utils import pourcentage


class ResultatDepartementQuerySet(models.QuerySet):
    """QuerySet personnalisé pour ResultatDepartement"""

    def recalculer_pourcentages(self, departement_id):
        """Recalcule la part de chaque parti dans les voix du département"""
        resultats = list(
            self.model.objects.filter(departement_id=departement_id).values_list('pk', 'nombre_vote')
        )
        total = sum(nombre_vote for _, nombre_vote in resultats)

        for pk, nombre_vote in resultats:
            self.model.objects.filter(pk=pk).update(pourcentage=pourcentage(nombre_vote, total))
        return total
