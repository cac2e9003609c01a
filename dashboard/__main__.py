"""Запуск: python -m dashboard [--host H] [--port P] [--dev] [--reload]"""

import argparse

from dashboard.app import run_dashboard
from dashboard.config import settings


def main():
    parser = argparse.ArgumentParser(description=f'Запуск {settings.APP_NAME}')
    parser.add_argument('--host', default=settings.DASHBOARD_HOST, help='Host для запуска')
    parser.add_argument('--port', type=int, default=settings.DASHBOARD_PORT, help='Port для запуска')
    parser.add_argument('--dev', action='store_true', help='Режим разработки')
    parser.add_argument('--reload', action='store_true', help='Автоперезагрузка')

    args = parser.parse_args()

    settings.setup_logging()
    run_dashboard(
        host=args.host,
        port=args.port,
        dev=args.dev or None,
        reload=args.reload or None
    )


if __name__ == "__main__":
    main()
