"""
Management command to render a markdown file through the content pipeline.

Useful for checking how a post will look, and which video URLs are turned
into embeds, without going through the site.
"""

import sys

from django.core.management.base import BaseCommand, CommandError

from content.markdown.preprocessors import apply_preprocessors
from content.markdown.renderer import render_markdown
from content.markdown.text import markdown_to_plain_text


class Command(BaseCommand):
    help = 'Render a markdown file (or stdin) with video embeds and sanitization'

    def add_arguments(self, parser):
        parser.add_argument(
            'path',
            help='Markdown file to render, or "-" for stdin',
        )
        parser.add_argument(
            '--plain',
            action='store_true',
            help='Print plain text instead of HTML',
        )
        parser.add_argument(
            '--embeds-only',
            action='store_true',
            help='Only run video embed injection and print the resulting markdown',
        )

    def handle(self, *args, **options):
        path = options['path']
        plain = options.get('plain')
        embeds_only = options.get('embeds_only')

        if plain and embeds_only:
            raise CommandError('--plain and --embeds-only are mutually exclusive')

        text = self._read(path)

        if embeds_only:
            output = apply_preprocessors(text, {})
        elif plain:
            output = markdown_to_plain_text(text)
        else:
            try:
                output = render_markdown(text)
            except (RuntimeError, OSError) as e:
                raise CommandError(f'Pandoc failed: {e}')

        self.stdout.write(output)

    def _read(self, path):
        if path == '-':
            return sys.stdin.read()
        try:
            with open(path, encoding='utf-8') as handle:
                return handle.read()
        except OSError as e:
            raise CommandError(f'Cannot read {path}: {e}')
