# resultats/serializers.py
from rest_framework import serializers

from common.serializers import CoherenceSerializerMixin
from participation.services.coherence import valider_donnees_participation, valider_vote
from resultats.models import (
    Candidat, PartiPolitique, PvArrondissement, PvDepartement, RedressementBureauVote,
    RedressementCandidat, ResultatBureauVote, ResultatDepartement, controler_vote_bureau
)

CHAMPS_CONTROLE = ['has_incoherence', 'erreurs_detectees', 'avertissements']
CHAMPS_WORKFLOW = ['statut', 'validateur', 'date_validation', 'motif_rejet',
                   'commentaires_validation']
CHAMPS_AUDIT = ['code_createur', 'date_creation', 'code_modificateur', 'date_modification']


class PartiPolitiqueSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartiPolitique
        fields = ['id', 'designation', 'abbreviation', 'description', 'couleur', 'logo']


class CandidatSerializer(serializers.ModelSerializer):
    parti_designation = serializers.CharField(source='parti.designation', read_only=True, default=None)

    class Meta:
        model = Candidat
        fields = ['id', 'nom', 'prenom', 'parti', 'parti_designation', 'numero_ordre', 'is_active']


# ============================================================
# RÉSULTATS
# ============================================================

class ResultatBureauVoteSerializer(CoherenceSerializerMixin, serializers.ModelSerializer):
    parti_designation = serializers.CharField(source='parti.designation', read_only=True)

    class Meta:
        model = ResultatBureauVote
        fields = [
            'id', 'bureau_vote', 'parti', 'parti_designation', 'nombre_vote', 'forcer',
        ] + CHAMPS_CONTROLE + CHAMPS_AUDIT
        read_only_fields = CHAMPS_CONTROLE + CHAMPS_AUDIT

    def controler(self, donnees):
        autres = ResultatBureauVote.objects.filter(bureau_vote_id=donnees.get('bureau_vote'))
        if self.instance is not None:
            autres = autres.exclude(pk=self.instance.pk)
        return controler_vote_bureau(
            donnees.get('bureau_vote'),
            donnees.get('nombre_vote') or 0,
            list(autres.values_list('nombre_vote', flat=True))
        )

    def validate_bureau_vote(self, bureau_vote):
        if not self.context['request'].user.peut_editer_bureau_vote(bureau_vote):
            raise serializers.ValidationError("Ce bureau de vote n'est pas dans votre périmètre.")
        return bureau_vote


class ResultatDepartementSerializer(serializers.ModelSerializer):
    parti_designation = serializers.CharField(source='parti.designation', read_only=True)
    departement_libelle = serializers.CharField(source='departement.libelle', read_only=True)

    class Meta:
        model = ResultatDepartement
        fields = [
            'id', 'departement', 'departement_libelle', 'parti', 'parti_designation',
            'nombre_vote', 'pourcentage',
        ] + CHAMPS_WORKFLOW + CHAMPS_AUDIT
        read_only_fields = ['pourcentage'] + CHAMPS_WORKFLOW + CHAMPS_AUDIT

    def validate_departement(self, departement):
        if not self.context['request'].user.peut_editer_departement(departement):
            raise serializers.ValidationError("Ce département n'est pas dans votre périmètre.")
        return departement


# ============================================================
# REDRESSEMENTS
# ============================================================

class RedressementBureauVoteSerializer(CoherenceSerializerMixin, serializers.ModelSerializer):

    class Meta:
        model = RedressementBureauVote
        fields = [
            'id', 'bureau_vote',
            'nombre_inscrit_initial', 'nombre_inscrit_redresse',
            'nombre_votant_initial', 'nombre_votant_redresse',
            'bulletin_nul_initial', 'bulletin_nul_redresse',
            'suffrage_exprime_initial', 'suffrage_exprime_redresse',
            'raison_redressement', 'date_redressement', 'forcer',
        ] + CHAMPS_WORKFLOW + CHAMPS_AUDIT
        read_only_fields = ['date_redressement'] + CHAMPS_WORKFLOW + CHAMPS_AUDIT

    def controler(self, donnees):
        """Les valeurs redressées doivent former une participation cohérente"""
        redressement = RedressementBureauVote(**{
            champ: donnees.get(champ) for champ in donnees
            if champ.endswith('_initial') or champ.endswith('_redresse')
        })
        redressement.bureau_vote_id = donnees.get('bureau_vote')
        if self.instance is None:
            redressement.relever_valeurs_initiales()

        return valider_donnees_participation(redressement.valeurs_redressees())

    def validate_bureau_vote(self, bureau_vote):
        if not self.context['request'].user.peut_editer_bureau_vote(bureau_vote):
            raise serializers.ValidationError("Ce bureau de vote n'est pas dans votre périmètre.")
        return bureau_vote


class RedressementCandidatSerializer(CoherenceSerializerMixin, serializers.ModelSerializer):
    bureau_vote = serializers.IntegerField(source='resultat.bureau_vote_id', read_only=True)
    parti = serializers.IntegerField(source='resultat.parti_id', read_only=True)

    class Meta:
        model = RedressementCandidat
        fields = [
            'id', 'resultat', 'bureau_vote', 'parti', 'nombre_vote_initial',
            'nombre_vote_redresse', 'raison_redressement', 'date_redressement', 'forcer',
        ] + CHAMPS_WORKFLOW + CHAMPS_AUDIT
        read_only_fields = ['date_redressement'] + CHAMPS_WORKFLOW + CHAMPS_AUDIT

    def controler(self, donnees):
        resultat = ResultatBureauVote.objects.filter(pk=donnees.get('resultat')).first()
        if resultat is None:
            return valider_vote(donnees.get('nombre_vote_redresse') or 0)
        return controler_vote_bureau(
            resultat.bureau_vote_id,
            donnees.get('nombre_vote_redresse') or 0,
            resultat.autres_votes()
        )

    def validate_resultat(self, resultat):
        if not self.context['request'].user.peut_editer_bureau_vote(resultat.bureau_vote):
            raise serializers.ValidationError("Ce résultat n'est pas dans votre périmètre.")
        return resultat


# ============================================================
# PV SCANNÉS
# ============================================================

class PvArrondissementSerializer(serializers.ModelSerializer):
    fichier = serializers.FileField(write_only=True)

    class Meta:
        model = PvArrondissement
        fields = ['id', 'arrondissement', 'libelle', 'fichier', 'url_pv', 'public_id',
                  'hash_file', 'nom_fichier', 'taille', 'code_createur', 'date_creation']
        read_only_fields = ['url_pv', 'public_id', 'hash_file', 'nom_fichier', 'taille',
                            'code_createur', 'date_creation']

    def validate_arrondissement(self, arrondissement):
        if not self.context['request'].user.peut_editer_arrondissement(arrondissement):
            raise serializers.ValidationError("Cet arrondissement n'est pas dans votre périmètre.")
        return arrondissement


class PvDepartementSerializer(serializers.ModelSerializer):
    fichier = serializers.FileField(write_only=True)

    class Meta:
        model = PvDepartement
        fields = ['id', 'departement', 'libelle', 'fichier', 'url_pv', 'public_id',
                  'hash_file', 'nom_fichier', 'taille', 'code_createur', 'date_creation']
        read_only_fields = ['url_pv', 'public_id', 'hash_file', 'nom_fichier', 'taille',
                            'code_createur', 'date_creation']

    def validate_departement(self, departement):
        if not self.context['request'].user.peut_editer_departement(departement):
            raise serializers.ValidationError("Ce département n'est pas dans votre périmètre.")
        return departement
