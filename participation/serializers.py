# participation/serializers.py
from rest_framework import serializers

from common.serializers import CoherenceSerializerMixin
from participation.models import (
    ParticipationBureauVote, ParticipationCommune, ParticipationDepartement
)
from participation.services.coherence import (
    valider_donnees_participation, valider_participation_commune
)

CHAMPS_CONTROLE = ['has_incoherence', 'erreurs_detectees', 'avertissements']
CHAMPS_WORKFLOW = ['statut', 'validateur', 'date_validation', 'motif_rejet',
                   'commentaires_validation']
CHAMPS_AUDIT = ['code_createur', 'date_creation', 'code_modificateur', 'date_modification']


class ParticipationBureauVoteSerializer(CoherenceSerializerMixin, serializers.ModelSerializer):
    bureau_vote_designation = serializers.CharField(source='bureau_vote.designation', read_only=True)

    class Meta:
        model = ParticipationBureauVote
        fields = [
            'id', 'bureau_vote', 'bureau_vote_designation', 'nombre_inscrit',
            'nombre_votant', 'bulletin_nul', 'suffrage_exprime', 'taux_participation',
            'forcer',
        ] + CHAMPS_CONTROLE + CHAMPS_AUDIT
        read_only_fields = ['taux_participation'] + CHAMPS_CONTROLE + CHAMPS_AUDIT

    def controler(self, donnees):
        return valider_donnees_participation(donnees)

    def validate_bureau_vote(self, bureau_vote):
        user = self.context['request'].user
        if not user.peut_editer_bureau_vote(bureau_vote):
            raise serializers.ValidationError("Ce bureau de vote n'est pas dans votre périmètre.")
        return bureau_vote


class ParticipationCommuneSerializer(CoherenceSerializerMixin, serializers.ModelSerializer):
    arrondissement_libelle = serializers.CharField(source='arrondissement.libelle', read_only=True)
    departement = serializers.IntegerField(source='arrondissement.departement_id', read_only=True)

    class Meta:
        model = ParticipationCommune
        fields = [
            'id', 'arrondissement', 'arrondissement_libelle', 'departement',
            'nombre_bureaux', 'nombre_inscrits', 'nombre_votants', 'taux_participation',
            'bulletins_nuls', 'suffrages_valables', 'taux_abstention', 'forcer',
        ] + CHAMPS_CONTROLE + CHAMPS_WORKFLOW + CHAMPS_AUDIT
        read_only_fields = (
            ['taux_participation', 'taux_abstention'] + CHAMPS_CONTROLE + CHAMPS_WORKFLOW +
            CHAMPS_AUDIT
        )

    def controler(self, donnees):
        return valider_participation_commune(donnees)

    def validate_arrondissement(self, arrondissement):
        user = self.context['request'].user
        if not user.peut_editer_arrondissement(arrondissement):
            raise serializers.ValidationError("Cet arrondissement n'est pas dans votre périmètre.")
        return arrondissement


class ParticipationDepartementSerializer(CoherenceSerializerMixin, serializers.ModelSerializer):
    departement_libelle = serializers.CharField(source='departement.libelle', read_only=True)

    class Meta:
        model = ParticipationDepartement
        fields = (
            ['id', 'departement', 'departement_libelle'] +
            ParticipationDepartement.CHAMPS_SAISIE + ['forcer'] +
            CHAMPS_CONTROLE + CHAMPS_WORKFLOW + CHAMPS_AUDIT
        )
        read_only_fields = CHAMPS_CONTROLE + CHAMPS_WORKFLOW + CHAMPS_AUDIT

    def controler(self, donnees):
        return valider_donnees_participation(donnees)

    def validate_departement(self, departement):
        user = self.context['request'].user
        if not user.peut_editer_departement(departement):
            raise serializers.ValidationError("Ce département n'est pas dans votre périmètre.")
        return departement


class ControleParticipationSerializer(serializers.Serializer):
    """Saisie soumise au contrôle de cohérence sans enregistrement"""
    nombre_inscrit = serializers.IntegerField(required=False, allow_null=True)
    nombre_votant = serializers.IntegerField(required=False, allow_null=True)
    bulletin_nul = serializers.IntegerField(required=False, allow_null=True)
    suffrage_exprime = serializers.IntegerField(required=False, allow_null=True)
    taux_participation = serializers.FloatField(required=False, allow_null=True)
    nombre_enveloppe_urnes = serializers.IntegerField(required=False, allow_null=True)
    nombre_enveloppe_bulletins_differents = serializers.IntegerField(required=False, default=0)
    nombre_bulletin_electeur_identifiable = serializers.IntegerField(required=False, default=0)
    nombre_bulletin_enveloppes_signes = serializers.IntegerField(required=False, default=0)
    nombre_enveloppe_non_elecam = serializers.IntegerField(required=False, default=0)
    nombre_bulletin_non_elecam = serializers.IntegerField(required=False, default=0)
    nombre_bulletin_sans_enveloppe = serializers.IntegerField(required=False, default=0)
    nombre_enveloppe_vide = serializers.IntegerField(required=False, default=0)


class ControleVoteSerializer(serializers.Serializer):
    nombre_vote = serializers.IntegerField()
    autres_votes = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    participation = ControleParticipationSerializer(required=False)
