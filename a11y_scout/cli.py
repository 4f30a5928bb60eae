#!/usr/bin/env python3
"""
Точка входа для запуска краулера A11yScout через командную строку.

Команды:
  crawl URL   Обойти сайт и вывести/сохранить найденные страницы
  config      Показать текущую конфигурацию
  serve       Запустить HTTP-сервер с эндпоинтом POST /crawl

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-pages INT     Макс. число страниц (override max_pages)
  --max-depth INT     Макс. глубина обхода (override max_depth)
  --all-domains       Следовать ссылкам на другие домены
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Пример:
  a11y-scout crawl https://example.com --max-pages 50 --json crawl.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from a11y_scout import __version__
from a11y_scout.config import load_config
from a11y_scout.crawler.crawler import crawl_site
from a11y_scout.crawler.models import CrawlRequest
from a11y_scout.logger import DEFAULT_FORMAT, init_logging
from a11y_scout.report.html_report import render_html
from a11y_scout.report.json_report import render_json
from a11y_scout.server import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='A11yScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд A11yScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-pages', '-l', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Макс. число страниц (override max_pages)')
@click.option('--max-depth', '-d', 'max_depth', type=int, default=None,
              help='Макс. глубина обхода (override max_depth)')
@click.option('--all-domains', 'all_domains', is_flag=True,
              help='Следовать ссылкам на другие домены')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном (по умолчанию встроенный)'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def crawl(ctx, url, max_pages, max_depth, all_domains, json_output, html_output,
          template_dir, pretty, crawl_timeout):
    """Обойти сайт начиная с URL и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    try:
        request = CrawlRequest.from_settings(
            cfg,
            url,
            max_pages=max_pages,
            max_depth=max_depth,
            same_domain_only=False if all_domains else None,
        )
        if crawl_timeout:
            result = asyncio.run(
                asyncio.wait_for(crawl_site(request, cfg), timeout=crawl_timeout)
            )
        else:
            result = asyncio.run(crawl_site(request, cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    # Если не сохраняем в файл, печатаем в stdout
    if not json_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=indent))
        return

    if json_output:
        try:
            saved_json = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(result, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес (override host)')
@click.option('--port', type=click.IntRange(1, 65535), default=None, help='Порт (override port)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-сервер краулера."""
    run_server(ctx.obj['config'], host=host, port=port)


if __name__ == "__main__":
    cli()
