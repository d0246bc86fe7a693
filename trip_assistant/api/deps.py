# Role: Process-wide singletons shared by the routers (one in-memory session store per process).

from trip_assistant.core.flow_controller import FlowController
from trip_assistant.core.payments import PaymentEventHandler, StripePaymentVerifier
from trip_assistant.tools.activity_search import MockActivitySearchProvider
from trip_assistant.tools.flight_search import MockFlightSearchProvider
from trip_assistant.tools.hotel_search import MockHotelSearchProvider

flow_controller = FlowController()

flight_provider = MockFlightSearchProvider()
hotel_provider = MockHotelSearchProvider()
activity_provider = MockActivitySearchProvider()

payment_verifier = StripePaymentVerifier()
payment_handler = PaymentEventHandler()
