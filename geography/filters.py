# geography/filters.py
from django_filters import rest_framework as filters

from geography.models import Arrondissement, BureauVote, Departement


class DepartementFilter(filters.FilterSet):
    region = filters.NumberFilter(field_name='region_id')

    class Meta:
        model = Departement
        fields = ['region']


class ArrondissementFilter(filters.FilterSet):
    region = filters.NumberFilter(field_name='region_id')
    departement = filters.NumberFilter(field_name='departement_id')

    class Meta:
        model = Arrondissement
        fields = ['region', 'departement']


class BureauVoteFilter(filters.FilterSet):
    """Filtres pour BureauVote"""

    region = filters.NumberFilter(field_name='arrondissement__departement__region_id')
    departement = filters.NumberFilter(field_name='arrondissement__departement_id')
    arrondissement = filters.NumberFilter(field_name='arrondissement_id')
    effectif_min = filters.NumberFilter(field_name='effectif', lookup_expr='gte')

    class Meta:
        model = BureauVote
        fields = ['region', 'departement', 'arrondissement']
