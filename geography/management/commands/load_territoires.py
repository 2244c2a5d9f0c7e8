# geography/management/commands/load_territoires.py
import csv
import os
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from geography.models import Arrondissement, BureauVote, Departement, Region


class Command(BaseCommand):
    help = 'Charge le découpage territorial (régions à bureaux de vote) depuis un fichier CSV'

    colonnes = [
        'code_region', 'region', 'code_departement', 'departement',
        'code_arrondissement', 'arrondissement', 'code_bureau', 'bureau',
    ]

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            type=str,
            default=os.path.join(settings.BASE_DIR, 'geography', 'data', 'territoires.csv'),
            help='Chemin vers le fichier CSV'
        )
        parser.add_argument('--delimiter', type=str, default=',')

    @transaction.atomic
    def handle(self, *args, **options):
        csv_file = options['file']

        if not os.path.exists(csv_file):
            raise CommandError(f'Fichier non trouvé: {csv_file}')

        self.stdout.write('Chargement du découpage territorial...\n')

        compteurs = {'regions': 0, 'departements': 0, 'arrondissements': 0, 'bureaux': 0}
        lignes_rejetees = 0

        with open(csv_file, 'r', encoding='utf-8') as file:
            reader = csv.DictReader(file, delimiter=options['delimiter'])

            manquantes = [c for c in self.colonnes if c not in (reader.fieldnames or [])]
            if manquantes:
                raise CommandError(f"Colonnes manquantes: {', '.join(manquantes)}")

            for numero, row in enumerate(reader, start=2):
                try:
                    self.charger_ligne(row, compteurs)
                except (ValueError, InvalidOperation) as e:
                    lignes_rejetees += 1
                    self.stdout.write(self.style.WARNING(f'Ligne {numero} ignorée: {e}'))

        self.stdout.write(self.style.SUCCESS('\n' + '=' * 60))
        self.stdout.write(self.style.SUCCESS('CHARGEMENT TERMINÉ'))
        self.stdout.write(self.style.SUCCESS('=' * 60))
        self.stdout.write(f"Régions créées: {compteurs['regions']}")
        self.stdout.write(f"Départements créés: {compteurs['departements']}")
        self.stdout.write(f"Arrondissements créés: {compteurs['arrondissements']}")
        self.stdout.write(f"Bureaux de vote créés: {compteurs['bureaux']}")
        if lignes_rejetees:
            self.stdout.write(self.style.WARNING(f'Lignes rejetées: {lignes_rejetees}'))

    def charger_ligne(self, row, compteurs):
        region, created = Region.objects.get_or_create(
            code=int(row['code_region']),
            defaults={'libelle': row['region'].strip()}
        )
        compteurs['regions'] += created

        departement, created = Departement.objects.get_or_create(
            code=int(row['code_departement']),
            defaults={'libelle': row['departement'].strip(), 'region': region}
        )
        compteurs['departements'] += created

        arrondissement, created = Arrondissement.objects.get_or_create(
            code=int(row['code_arrondissement']),
            defaults={'libelle': row['arrondissement'].strip(), 'departement': departement}
        )
        compteurs['arrondissements'] += created

        _, created = BureauVote.objects.get_or_create(
            code=int(row['code_bureau']),
            defaults={
                'designation': row['bureau'].strip(),
                'arrondissement': arrondissement,
                'effectif': int(row.get('effectif') or 0),
                'latitude': self.decimal(row.get('latitude')),
                'longitude': self.decimal(row.get('longitude')),
            }
        )
        compteurs['bureaux'] += created

    @staticmethod
    def decimal(valeur):
        valeur = (valeur or '').strip()
        return Decimal(valeur) if valeur else None
