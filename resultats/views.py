# resultats/views.py
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts import roles
from accounts.permissions import HasEntityPermission
from common.mixins import SaisieViewSetMixin, WorkflowViewSetMixin
from resultats.filters import (
    RedressementBureauVoteFilter, RedressementCandidatFilter, ResultatBureauVoteFilter,
    ResultatDepartementFilter
)
from resultats.models import (
    Candidat, PartiPolitique, PvArrondissement, PvDepartement, RedressementBureauVote,
    RedressementCandidat, ResultatBureauVote, ResultatDepartement
)
from resultats.serializers import (
    CandidatSerializer, PartiPolitiqueSerializer, PvArrondissementSerializer,
    PvDepartementSerializer, RedressementBureauVoteSerializer, RedressementCandidatSerializer,
    ResultatBureauVoteSerializer, ResultatDepartementSerializer
)
from resultats.services.pv_service import pv_service


# ============================================================
# RÉFÉRENTIELS
# ============================================================

class PartiPolitiqueViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = PartiPolitique.objects.all()
    serializer_class = PartiPolitiqueSerializer
    permission_classes = [IsAuthenticated]
    search_fields = ['designation', 'abbreviation']


class CandidatViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Candidat.objects.select_related('parti')
    serializer_class = CandidatSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['parti', 'is_active']
    search_fields = ['nom', 'prenom']


# ============================================================
# RÉSULTATS
# ============================================================

class ResultatBureauVoteViewSet(SaisieViewSetMixin, viewsets.ModelViewSet):
    serializer_class = ResultatBureauVoteSerializer
    permission_classes = [IsAuthenticated, HasEntityPermission]
    filterset_class = ResultatBureauVoteFilter
    ordering_fields = ['nombre_vote', 'bureau_vote']
    entite = roles.RESULTAT

    def get_queryset(self):
        queryset = ResultatBureauVote.objects.select_related('parti', 'bureau_vote__arrondissement')
        return self.request.user.filtrer_par_territoire(queryset, bureau_vote='bureau_vote')


class ResultatDepartementViewSet(SaisieViewSetMixin, WorkflowViewSetMixin, viewsets.ModelViewSet):
    serializer_class = ResultatDepartementSerializer
    permission_classes = [IsAuthenticated, HasEntityPermission]
    filterset_class = ResultatDepartementFilter
    ordering_fields = ['nombre_vote', 'pourcentage', 'departement']
    entite = roles.RESULTAT

    def get_queryset(self):
        queryset = ResultatDepartement.objects.select_related('parti', 'departement')
        return self.request.user.filtrer_par_territoire(queryset, departement='departement')

    def perform_destroy(self, instance):
        departement_id = instance.departement_id
        instance.delete()
        ResultatDepartement.objects.recalculer_pourcentages(departement_id)


# ============================================================
# REDRESSEMENTS
# ============================================================

class RedressementBureauVoteViewSet(SaisieViewSetMixin, WorkflowViewSetMixin,
                                    viewsets.ModelViewSet):
    """Redressements de participation, appliqués à l'approbation"""
    serializer_class = RedressementBureauVoteSerializer
    permission_classes = [IsAuthenticated, HasEntityPermission]
    filterset_class = RedressementBureauVoteFilter
    entite = roles.REDRESSEMENT_BUREAU

    def get_queryset(self):
        queryset = RedressementBureauVote.objects.select_related('bureau_vote__arrondissement')
        return self.request.user.filtrer_par_territoire(queryset, bureau_vote='bureau_vote')


class RedressementCandidatViewSet(SaisieViewSetMixin, WorkflowViewSetMixin, viewsets.ModelViewSet):
    """Redressements de voix, appliqués à l'approbation"""
    serializer_class = RedressementCandidatSerializer
    permission_classes = [IsAuthenticated, HasEntityPermission]
    filterset_class = RedressementCandidatFilter
    entite = roles.REDRESSEMENT_CANDIDAT

    def get_queryset(self):
        queryset = RedressementCandidat.objects.select_related('resultat__bureau_vote')
        return self.request.user.filtrer_par_territoire(queryset, bureau_vote='resultat__bureau_vote')


# ============================================================
# PV SCANNÉS
# ============================================================

class BasePvViewSet(mixins.CreateModelMixin,
                    mixins.RetrieveModelMixin,
                    mixins.DestroyModelMixin,
                    mixins.ListModelMixin,
                    viewsets.GenericViewSet):
    """Téléversement (multipart), consultation et suppression des PV scannés"""
    permission_classes = [IsAuthenticated, HasEntityPermission]
    parser_classes = [MultiPartParser, FormParser]
    entite = roles.PV
    champ_territoire = None

    def get_territoire(self, obj):
        return obj.territoire

    def get_queryset(self):
        queryset = self.serializer_class.Meta.model.objects.all()
        return self.request.user.filtrer_par_territoire(
            queryset, **{self.champ_territoire: self.champ_territoire}
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            pv = pv_service.televerser(
                self.serializer_class.Meta.model,
                data['fichier'],
                request.user,
                libelle=data.get('libelle'),
                **{self.champ_territoire: data[self.champ_territoire]}
            )
        except ValueError as e:
            raise ValidationError({'fichier': str(e)})

        return Response(self.get_serializer(pv).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        pv_service.supprimer(instance)


class PvArrondissementViewSet(BasePvViewSet):
    serializer_class = PvArrondissementSerializer
    filterset_fields = ['arrondissement']
    champ_territoire = 'arrondissement'


class PvDepartementViewSet(BasePvViewSet):
    serializer_class = PvDepartementSerializer
    filterset_fields = ['departement']
    champ_territoire = 'departement'
