import logging
import os

from openfeature import api
from openfeature.evaluation_context import EvaluationContext
from openfeature.track import TrackingEventDetails

from DevCycleClient.open_feature_provider import DevCycleProvider

SDK_KEY = os.environ.get("DEVCYCLE_SERVER_SDK_KEY", "dvc_server_example")
FLAG_KEY = "new-checkout"

logging.basicConfig(level=logging.INFO)

api.set_provider(DevCycleProvider.from_sdk_key(SDK_KEY))
client = api.get_client()

context = EvaluationContext(
    targeting_key="example-user",
    attributes={"country": "CA", "plan": "pro"},
)

details = client.get_boolean_details(FLAG_KEY, False, context)
print(f"{FLAG_KEY} = {details.value} ({details.reason})")

client.track("checkout", context, TrackingEventDetails(value=1))

api.shutdown()
