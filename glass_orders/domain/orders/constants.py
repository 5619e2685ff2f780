"""Order workflow constants - statuses, glass positions and Notion property names"""

from enum import Enum


class OrderStatus(str, Enum):
    """
    Order lifecycle:

        Pendiente -> En Stock | Sin Stock -> Programado -> Completado -> Facturado

    with Sin Stock -> En Stock as the only back-edge. The API writes whatever
    status the caller submits; these values are the ones the workflow uses.
    """

    PENDIENTE = "Pendiente"
    EN_STOCK = "En Stock"
    SIN_STOCK = "Sin Stock"
    PROGRAMADO = "Programado"
    COMPLETADO = "Completado"
    FACTURADO = "Facturado"


KNOWN_STATUSES = {status.value for status in OrderStatus}


class GlassPosition(str, Enum):
    PARABRISAS = "Parabrisas"
    LATERAL_IZQ = "Lateral Izq"
    LATERAL_DER = "Lateral Der"
    TRASERO = "Trasero"


GLASS_POSITIONS = [position.value for position in GlassPosition]

ORDER_ID_PREFIX = "ORD"

# Orders data source property names
PROP_ORDER_ID = "Order ID"
PROP_CLIENT = "Client"
PROP_UNIT_NUMBER = "Unit Number"
PROP_TRUCK_MODEL = "Truck Model"
PROP_GLASS_POSITION = "Glass Position"
PROP_STATUS = "Status"
PROP_PRICE = "Price"
PROP_NOTES = "Notes"
PROP_INVENTORY_NOTE = "Inventory Note"
PROP_ASSIGNED_CREW = "Assigned Crew"
PROP_SCHEDULE_DATE = "Schedule Date"
PROP_JOB_PROGRESS = "Job Progress"
PROP_BEFORE_PHOTOS = "Before Photos"
PROP_AFTER_PHOTOS = "After Photos"
PROP_SIGNATURE = "Customer Signature"
PROP_CUSTOMER_NAME = "Customer Name"
PROP_GPS_LOCATION = "GPS Location"
PROP_COMPLETION_TIME = "Completion Time"
PROP_COMPLETED_BY = "Completed By"
PROP_INVOICE_NUMBER = "Invoice Number"
PROP_INVOICE_DATE = "Invoice Date"
PROP_INVOICE_PDF_URL = "Invoice PDF URL"
PROP_INVOICE_SENT_DATE = "Invoice Sent Date"
