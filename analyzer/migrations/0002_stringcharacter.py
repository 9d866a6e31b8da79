import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('analyzer', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='StringCharacter',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('character', models.CharField(max_length=16)),
                ('count', models.PositiveIntegerField()),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='characters', to='analyzer.stringrecord')),
            ],
        ),
        migrations.AddConstraint(
            model_name='stringcharacter',
            constraint=models.UniqueConstraint(fields=('record', 'character'), name='unique_character_per_record'),
        ),
    ]
