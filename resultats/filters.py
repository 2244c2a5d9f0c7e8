# resultats/filters.py
from django_filters import rest_framework as filters

from common.models import WorkflowModel
from resultats.models import (
    RedressementBureauVote, RedressementCandidat, ResultatBureauVote, ResultatDepartement
)


class ResultatBureauVoteFilter(filters.FilterSet):
    region = filters.NumberFilter(field_name='bureau_vote__arrondissement__departement__region_id')
    departement = filters.NumberFilter(field_name='bureau_vote__arrondissement__departement_id')
    arrondissement = filters.NumberFilter(field_name='bureau_vote__arrondissement_id')

    class Meta:
        model = ResultatBureauVote
        fields = ['region', 'departement', 'arrondissement', 'bureau_vote', 'parti',
                  'has_incoherence']


class ResultatDepartementFilter(filters.FilterSet):
    """Filtres pour ResultatDepartement"""

    region = filters.NumberFilter(field_name='departement__region_id')
    statut = filters.ChoiceFilter(choices=WorkflowModel.STATUT_CHOICES)

    class Meta:
        model = ResultatDepartement
        fields = ['region', 'departement', 'parti', 'statut']


class RedressementBureauVoteFilter(filters.FilterSet):
    departement = filters.NumberFilter(field_name='bureau_vote__arrondissement__departement_id')
    arrondissement = filters.NumberFilter(field_name='bureau_vote__arrondissement_id')
    statut = filters.ChoiceFilter(choices=WorkflowModel.STATUT_CHOICES)

    class Meta:
        model = RedressementBureauVote
        fields = ['departement', 'arrondissement', 'bureau_vote', 'statut']


class RedressementCandidatFilter(filters.FilterSet):
    bureau_vote = filters.NumberFilter(field_name='resultat__bureau_vote_id')
    parti = filters.NumberFilter(field_name='resultat__parti_id')
    statut = filters.ChoiceFilter(choices=WorkflowModel.STATUT_CHOICES)

    class Meta:
        model = RedressementCandidat
        fields = ['bureau_vote', 'parti', 'statut']
