# participation/views.py
from django.db.models import Avg, Count, Sum
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts import roles
from accounts.permissions import HasEntityPermission
from common.mixins import SaisieViewSetMixin, WorkflowViewSetMixin
from common.utils import taux_participation
from geography.models import Arrondissement
from participation.filters import (
    ParticipationBureauVoteFilter, ParticipationCommuneFilter, ParticipationDepartementFilter
)
from participation.models import (
    ParticipationBureauVote, ParticipationCommune, ParticipationDepartement
)
from participation.serializers import (
    ControleParticipationSerializer, ControleVoteSerializer,
    ParticipationBureauVoteSerializer, ParticipationCommuneSerializer,
    ParticipationDepartementSerializer
)
from participation.services.coherence import (
    valider_coherence_resultat, valider_donnees_participation, valider_vote
)


# ============================================================
# PARTICIPATION PAR BUREAU DE VOTE
# ============================================================

class ParticipationBureauVoteViewSet(SaisieViewSetMixin, viewsets.ModelViewSet):
    serializer_class = ParticipationBureauVoteSerializer
    permission_classes = [IsAuthenticated, HasEntityPermission]
    filterset_class = ParticipationBureauVoteFilter
    ordering_fields = ['bureau_vote', 'taux_participation', 'date_creation']
    entite = roles.PARTICIPATION

    def get_queryset(self):
        queryset = ParticipationBureauVote.objects.select_related(
            'bureau_vote__arrondissement__departement'
        )
        return self.request.user.filtrer_par_territoire(queryset, bureau_vote='bureau_vote')


# ============================================================
# PARTICIPATION PAR COMMUNE
# ============================================================

class ParticipationCommuneViewSet(SaisieViewSetMixin, WorkflowViewSetMixin, viewsets.ModelViewSet):
    """
    Participation agrégée par commune

    Les actions `user`, `arrondissement` et `rapport` sont en lecture ;
    les transitions de statut passent par le circuit de validation.
    """
    serializer_class = ParticipationCommuneSerializer
    permission_classes = [IsAuthenticated, HasEntityPermission]
    filterset_class = ParticipationCommuneFilter
    search_fields = ['arrondissement__libelle']
    ordering_fields = ['date_creation', 'taux_participation', 'statut']
    entite = roles.PARTICIPATION
    actions_permissions = {
        'user': roles.LIRE,
        'par_arrondissement': roles.LIRE,
        'rapport': roles.LIRE,
    }

    def get_queryset(self):
        queryset = ParticipationCommune.objects.select_related(
            'arrondissement__departement__region'
        )
        return self.request.user.filtrer_par_territoire(queryset, arrondissement='arrondissement')

    @action(detail=False, methods=['get'])
    def user(self, request):
        """Saisies communales du territoire de l'utilisateur"""
        queryset = self.filter_queryset(self.get_queryset()).order_by(
            'arrondissement__region__libelle',
            'arrondissement__departement__libelle',
            'arrondissement__libelle'
        )
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'arrondissement/(?P<code>\d+)')
    def par_arrondissement(self, request, code=None):
        arrondissement = get_object_or_404(Arrondissement, pk=code)
        if not request.user.peut_acceder_arrondissement(arrondissement):
            raise PermissionDenied("Cet arrondissement n'est pas dans votre périmètre.")

        queryset = self.get_queryset().filter(arrondissement=arrondissement)
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=['get'])
    def rapport(self, request):
        """Totaux et moyennes sur les saisies communales accessibles"""
        queryset = self.filter_queryset(self.get_queryset())

        totaux = queryset.aggregate(
            total_arrondissements=Count('arrondissement', distinct=True),
            total_inscrits=Sum('nombre_inscrits'),
            total_votants=Sum('nombre_votants'),
            total_bureaux=Sum('nombre_bureaux'),
        )

        taux = [
            taux_participation(votants, inscrits)
            for inscrits, votants in queryset.filter(
                nombre_inscrits__gt=0, nombre_votants__gt=0
            ).values_list('nombre_inscrits', 'nombre_votants')
        ]
        moyenne = round(sum(taux) / len(taux), 2) if taux else 0

        return Response({
            'total_arrondissements': totaux['total_arrondissements'],
            'total_inscrits': totaux['total_inscrits'] or 0,
            'total_votants': totaux['total_votants'] or 0,
            'total_bureaux': totaux['total_bureaux'] or 0,
            'taux_participation_moyen': moyenne,
            'taux_abstention_moyen': round(100 - moyenne, 2),
            'par_statut': {
                ligne['statut']: ligne['n']
                for ligne in queryset.order_by().values('statut').annotate(n=Count('id'))
            },
        })


# ============================================================
# PARTICIPATION PAR DÉPARTEMENT
# ============================================================

class ParticipationDepartementViewSet(SaisieViewSetMixin, WorkflowViewSetMixin,
                                      viewsets.ModelViewSet):
    serializer_class = ParticipationDepartementSerializer
    permission_classes = [IsAuthenticated, HasEntityPermission]
    filterset_class = ParticipationDepartementFilter
    search_fields = ['departement__libelle']
    ordering_fields = ['date_creation', 'taux_participation', 'statut']
    entite = roles.PARTICIPATION

    def get_queryset(self):
        queryset = ParticipationDepartement.objects.select_related('departement__region')
        return self.request.user.filtrer_par_territoire(queryset, departement='departement')

    @action(detail=False, methods=['get'])
    def statistiques(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        stats = queryset.aggregate(
            total=Count('id'),
            total_inscrits=Sum('nombre_inscrit'),
            total_votants=Sum('nombre_votant'),
            taux_moyen=Avg('taux_participation'),
        )
        stats['incoherentes'] = queryset.incoherentes().count()
        stats['taux_moyen'] = round(stats['taux_moyen'] or 0, 2)
        return Response(stats)


# ============================================================
# CONTRÔLE DE COHÉRENCE SANS ENREGISTREMENT
# ============================================================

class CoherenceViewSet(viewsets.ViewSet):
    """Exécute les contrôles de cohérence sur une saisie sans l'enregistrer"""
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['post'])
    def participation(self, request):
        serializer = ControleParticipationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        resultat = valider_donnees_participation(serializer.validated_data)
        return Response(resultat.to_dict(), status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def vote(self, request):
        serializer = ControleVoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        resultat = valider_vote(data['nombre_vote'], data['autres_votes'])
        if data.get('participation'):
            resultat = resultat.fusionner(valider_coherence_resultat(
                data['nombre_vote'], data['participation'], data['autres_votes']
            ))
        return Response(resultat.to_dict(), status=status.HTTP_200_OK)
