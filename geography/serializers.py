# geography/serializers.py
from rest_framework import serializers

from geography.models import Arrondissement, BureauVote, Departement, Region


class RegionSerializer(serializers.ModelSerializer):
    nombre_departements = serializers.IntegerField(source='departements.count', read_only=True)

    class Meta:
        model = Region
        fields = ['code', 'libelle', 'abbreviation', 'chef_lieu', 'description',
                  'nombre_departements']


class DepartementSerializer(serializers.ModelSerializer):
    region_libelle = serializers.CharField(source='region.libelle', read_only=True)

    class Meta:
        model = Departement
        fields = ['code', 'libelle', 'abbreviation', 'chef_lieu', 'description',
                  'region', 'region_libelle']


class ArrondissementSerializer(serializers.ModelSerializer):
    departement_libelle = serializers.CharField(source='departement.libelle', read_only=True)
    region_libelle = serializers.CharField(source='region.libelle', read_only=True)

    class Meta:
        model = Arrondissement
        fields = ['code', 'libelle', 'abbreviation', 'description', 'departement',
                  'departement_libelle', 'region', 'region_libelle']


class BureauVoteSerializer(serializers.ModelSerializer):
    arrondissement_libelle = serializers.CharField(source='arrondissement.libelle', read_only=True)
    departement = serializers.IntegerField(source='arrondissement.departement_id', read_only=True)

    class Meta:
        model = BureauVote
        fields = ['code', 'designation', 'description', 'arrondissement',
                  'arrondissement_libelle', 'departement', 'latitude', 'longitude',
                  'altitude', 'effectif']
