# accounts/management/commands/create_administrateur.py
from django.core.management.base import BaseCommand, CommandError

from accounts import roles
from accounts.models import User


class Command(BaseCommand):
    help = 'Crée un administrateur avec accès à tout le territoire'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, help="Email de l'administrateur")
        parser.add_argument('--first-name', type=str, help='Prénom')
        parser.add_argument('--last-name', type=str, help='Nom')
        parser.add_argument('--password', type=str, required=True, help='Mot de passe')

    def handle(self, *args, **options):
        email = options.get('email') or 'admin@elections.cm'

        if User.objects.filter(email=email).exists():
            raise CommandError(f'Utilisateur {email} existe déjà')

        user = User.objects.create_user(
            email=email,
            password=options['password'],
            first_name=options.get('first_name') or 'Admin',
            last_name=options.get('last_name') or 'Elections',
            role=roles.ADMINISTRATEUR,
            is_staff=True,
        )

        self.stdout.write(self.style.SUCCESS('=' * 70))
        self.stdout.write(self.style.SUCCESS('ADMINISTRATEUR CRÉÉ'))
        self.stdout.write(self.style.SUCCESS('=' * 70))
        self.stdout.write(f'Email: {user.email}')
        self.stdout.write(f'Nom: {user.nom_complet}')
        self.stdout.write(f'Rôle: {user.get_role_display()}')
