# geography/views.py
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from geography.filters import ArrondissementFilter, BureauVoteFilter, DepartementFilter
from geography.models import Arrondissement, BureauVote, Departement, Region
from geography.serializers import (
    ArrondissementSerializer, BureauVoteSerializer, DepartementSerializer, RegionSerializer
)


# ============================================================
# DÉCOUPAGE TERRITORIAL (LECTURE SEULE)
# ============================================================

class RegionViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = RegionSerializer
    permission_classes = [IsAuthenticated]
    search_fields = ['libelle', 'abbreviation', 'chef_lieu']
    ordering_fields = ['code', 'libelle']

    def get_queryset(self):
        return self.request.user.get_regions_accessibles().order_by('libelle')


class DepartementViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = DepartementSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = DepartementFilter
    search_fields = ['libelle', 'abbreviation', 'chef_lieu']
    ordering_fields = ['code', 'libelle']

    def get_queryset(self):
        return self.request.user.get_departements_accessibles().select_related('region')

    @action(detail=False, methods=['get'])
    def accessibles(self, request):
        """Départements accessibles à l'utilisateur connecté"""
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response(serializer.data)


class ArrondissementViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ArrondissementSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = ArrondissementFilter
    search_fields = ['libelle', 'abbreviation']
    ordering_fields = ['code', 'libelle']

    def get_queryset(self):
        return self.request.user.get_arrondissements_accessibles().select_related(
            'departement', 'region'
        )


class BureauVoteViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = BureauVoteSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = BureauVoteFilter
    search_fields = ['designation']
    ordering_fields = ['code', 'designation', 'effectif']

    def get_queryset(self):
        return self.request.user.get_bureaux_vote_accessibles()
