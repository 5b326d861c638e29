#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""
import os
import sys


def main():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hairalyzer_django.settings')
    from django.core.management import execute_from_command_line
    from django.core.management.commands.runserver import Command as runserver

    # PORT from the environment becomes the default runserver port
    runserver.default_port = os.getenv('PORT', runserver.default_port)
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
