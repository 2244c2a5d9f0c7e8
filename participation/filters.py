# participation/filters.py
from django_filters import rest_framework as filters

from common.models import WorkflowModel
from participation.models import (
    ParticipationBureauVote, ParticipationCommune, ParticipationDepartement
)


class ParticipationBureauVoteFilter(filters.FilterSet):
    region = filters.NumberFilter(field_name='bureau_vote__arrondissement__departement__region_id')
    departement = filters.NumberFilter(field_name='bureau_vote__arrondissement__departement_id')
    arrondissement = filters.NumberFilter(field_name='bureau_vote__arrondissement_id')
    has_incoherence = filters.BooleanFilter()

    class Meta:
        model = ParticipationBureauVote
        fields = ['region', 'departement', 'arrondissement', 'has_incoherence']


class ParticipationCommuneFilter(filters.FilterSet):
    """Filtres pour ParticipationCommune"""

    region = filters.NumberFilter(field_name='arrondissement__region_id')
    departement = filters.NumberFilter(field_name='arrondissement__departement_id')
    arrondissement = filters.NumberFilter(field_name='arrondissement_id')
    statut = filters.ChoiceFilter(choices=WorkflowModel.STATUT_CHOICES)
    has_incoherence = filters.BooleanFilter()

    class Meta:
        model = ParticipationCommune
        fields = ['region', 'departement', 'arrondissement', 'statut', 'has_incoherence']


class ParticipationDepartementFilter(filters.FilterSet):
    """Filtres pour ParticipationDepartement"""

    region = filters.NumberFilter(field_name='departement__region_id')
    departement = filters.NumberFilter(field_name='departement_id')
    statut = filters.ChoiceFilter(choices=WorkflowModel.STATUT_CHOICES)
    has_incoherence = filters.BooleanFilter()

    class Meta:
        model = ParticipationDepartement
        fields = ['region', 'departement', 'statut', 'has_incoherence']
