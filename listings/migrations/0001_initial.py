import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Listing',
            fields=[
                ('id', models.CharField(max_length=40, primary_key=True, serialize=False)),
                ('position', models.PositiveIntegerField(default=0)),
                ('title', models.CharField(max_length=100)),
                ('description', models.TextField()),
                ('category', models.CharField(choices=[('Apartment', 'Apartment'), ('House', 'House'), ('Villa', 'Villa'), ('Condo', 'Condo'), ('Studio', 'Studio'), ('Cabin', 'Cabin'), ('Farm', 'Farm'), ('Castle', 'Castle'), ('Treehouse', 'Treehouse'), ('Boat', 'Boat'), ('Guesthouse', 'Guesthouse'), ('Hotel', 'Hotel'), ('Resort', 'Resort'), ('Cottage', 'Cottage'), ('Loft', 'Loft')], max_length=50)),
                ('listing_type', models.CharField(choices=[('rent', 'Rent'), ('purchase', 'Purchase')], max_length=20)),
                ('rent', models.PositiveIntegerField()),
                ('city', models.CharField(max_length=50)),
                ('landmark', models.CharField(max_length=100)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('images', models.JSONField(blank=True, default=list)),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('max_guests', models.PositiveSmallIntegerField(default=1)),
                ('bedrooms', models.PositiveSmallIntegerField(default=1)),
                ('bathrooms', models.PositiveSmallIntegerField(default=1)),
                ('status', models.CharField(choices=[('active', 'Active'), ('draft', 'Draft'), ('pending', 'Pending')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(blank=True, null=True)),
                ('host', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='listings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Listing',
                'verbose_name_plural': 'Listings',
                'ordering': ['host', 'position'],
            },
        ),
        migrations.CreateModel(
            name='ListingDraft',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('current_step', models.PositiveSmallIntegerField(default=1)),
                ('state', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='listing_draft', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Listing Draft',
                'ordering': ['-updated_at'],
            },
        ),
    ]
