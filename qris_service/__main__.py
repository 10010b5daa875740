"""
QRIS Microservice
Default port: 33416
"""
import logging

from .app import create_app
from .config import Settings


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
    )
    log = logging.getLogger('qris_service')

    app = create_app(settings)
    log.info("QRIS service running on port %d", settings.port)
    log.info("Endpoints: POST /generate-qris, POST /validate-qris, GET /health, "
             "GET /orderkuota/createpayment, GET /orderkuota/cekstatus")
    if not settings.api_keys:
        log.warning("QRIS_API_KEYS is empty, payment endpoints will reject every request")
    app.run(host=settings.host, port=settings.port, debug=False)


if __name__ == '__main__':
    main()
