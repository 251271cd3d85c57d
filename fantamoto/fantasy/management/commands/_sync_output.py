"""
Shared output helpers for the sync commands.
"""

from django.core.management.base import CommandError


def write_header(command, title, notes=()):
    command.stdout.write(command.style.SUCCESS(f'\n{"="*80}'))
    command.stdout.write(command.style.SUCCESS(title))
    for note in notes:
        command.stdout.write(command.style.WARNING(note))
    command.stdout.write(command.style.SUCCESS(f'{"="*80}\n'))


def write_summary(command, summary, fields):
    """
    Print the selected summary fields, then the per-item failures and the status line.

    Args:
        command: The running BaseCommand
        summary: Summary dict returned by a sync job
        fields: (label, key) pairs to print

    Raises:
        CommandError if the sync failed
    """
    command.stdout.write('\nSummary:')
    for label, key in fields:
        command.stdout.write(f'  {label + ":":<22}{summary.get(key, 0)}')

    for failure in summary.get('failures', []):
        command.stdout.write(command.style.WARNING(f'  ⚠️  {failure["key"]}: {failure["error"]}'))

    command.stdout.write('')
    write_status(command, summary)


def write_status(command, summary):
    status = summary.get('status', 'unknown')

    if status == 'success':
        command.stdout.write(command.style.SUCCESS('✅ Status: SUCCESS'))
    elif status == 'failed':
        raise CommandError(f'❌ Status: FAILED - {summary.get("error", "Unknown error")}')
    else:
        command.stdout.write(command.style.WARNING(f'⚠️  Status: {status.upper()}'))
