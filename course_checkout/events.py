import json
import logging
import threading
import time

import pika

from course_checkout import mailer
from course_checkout.config import Settings, get_settings

EXCHANGE = "course_checkout_events"
MAIL_ROUTING_KEY = "notification.email.send"
MAIL_BINDING_KEY = "notification.email.#"

logger = logging.getLogger(__name__)


def declare_queue(channel, queue: str, binding_key: str):
    """Declare the exchange plus a durable queue bound to it."""
    channel.exchange_declare(exchange=EXCHANGE, exchange_type="topic", durable=True)
    channel.queue_declare(queue=queue, durable=True)
    channel.queue_bind(exchange=EXCHANGE, queue=queue, routing_key=binding_key)


def publish_event(rabbitmq_url: str, routing_key: str, event: dict, queue: str = "", binding_key: str = ""):
    """
    Publish one JSON event. When a queue is given it is declared and bound
    first, so messages sent before any consumer has started are kept.
    """
    params = pika.URLParameters(rabbitmq_url)
    connection = pika.BlockingConnection(params)
    try:
        channel = connection.channel()
        if queue:
            declare_queue(channel, queue, binding_key or routing_key)
        else:
            channel.exchange_declare(exchange=EXCHANGE, exchange_type="topic", durable=True)
        body = json.dumps(event)
        channel.basic_publish(
            exchange=EXCHANGE,
            routing_key=routing_key,
            body=body,
            properties=pika.BasicProperties(content_type="application/json", delivery_mode=2),
        )
    finally:
        connection.close()


def _process_mail_event(body: dict, settings: Settings):
    """
    Called for every SendEmail event. Raises on malformed payloads so the
    message gets dead-lettered instead of silently dropped.
    """
    if body.get("type") != "SendEmail":
        raise ValueError(f"unexpected event type {body.get('type')!r}")
    payload = body.get("payload", {})
    mailer.send_email(settings, payload["to"], payload["subject"], payload["html"])


def _consumer_runloop(settings: Settings):
    """
    Persistent consumer loop: connects, declares exchange & queue, binds and consumes.
    Reconnects on errors with backoff.
    """
    while True:
        conn = None
        try:
            params = pika.URLParameters(settings.rabbitmq_url)
            conn = pika.BlockingConnection(params)
            ch = conn.channel()
            declare_queue(ch, settings.mail_queue, MAIL_BINDING_KEY)
            logger.info("Mail consumer bound queue=%s to %s", settings.mail_queue, EXCHANGE)

            def callback(ch, method, properties, body):
                try:
                    _process_mail_event(json.loads(body), settings)
                    ch.basic_ack(delivery_tag=method.delivery_tag)
                except Exception:
                    # no retry: a failed mail is logged and dropped
                    logger.exception("Error processing mail event %s", method.delivery_tag)
                    ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)

            ch.basic_qos(prefetch_count=1)
            ch.basic_consume(queue=settings.mail_queue, on_message_callback=callback, auto_ack=False)
            ch.start_consuming()

        except pika.exceptions.AMQPConnectionError as e:
            logger.warning("AMQP connection error in mail consumer: %s", e)
        except Exception:
            logger.exception("Unexpected exception in mail consumer loop")
        finally:
            try:
                if conn is not None and conn.is_open:
                    conn.close()
            except pika.exceptions.AMQPError as e:
                logger.debug("Ignoring error while closing consumer connection: %s", e)

        logger.info("Mail consumer will reconnect after backoff...")
        time.sleep(3)


_consumer = None


def start_mail_consumer(settings: Settings):
    global _consumer
    if _consumer is None:
        _consumer = threading.Thread(target=_consumer_runloop, args=(settings,), daemon=True)
        _consumer.start()


def run_mail_worker():
    """Entry point for a standalone mail worker process."""
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    if not settings.rabbitmq_url:
        raise SystemExit("RABBITMQ_URL is not set")
    logger.info("Mail worker consuming queue=%s", settings.mail_queue)
    _consumer_runloop(settings)
