"""
Unit tests for action dispatch and the response envelope.

Runs full proxy events through the dispatcher backed by the in-memory store.
"""

import json
from decimal import Decimal

import pytest

from storefront.handlers.dispatcher import ACTION_HANDLERS, Action, Dispatcher
from storefront.handlers.utils.request import ApiRequest
from storefront.logic import StorefrontServices
from storefront.models.records import RecordContext


def body_of(response):
    return json.loads(response["body"], parse_float=Decimal)


class TestActionTable:

    def test_every_action_has_a_handler(self):
        assert set(ACTION_HANDLERS) == set(Action)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ACTION_HANDLERS[Action.INIT] = lambda services, data: None

    @pytest.mark.parametrize("name", ["init", "Login", " ADD_ORDER", "DELETE_EVERYTHING", "", None, 42])
    def test_lookup_is_exact(self, name):
        assert Action.lookup(name) is None

    def test_lookup_known_action(self):
        assert Action.lookup("ORDER_LIST") is Action.ORDER_LIST


class TestUnknownActions:

    @pytest.mark.parametrize("action", ["FOO", "order_list", "Order_List"])
    def test_unknown_action_answers_empty_object(self, dispatcher, make_event, action):
        response = dispatcher.handle_event(make_event(action=action))

        assert response["statusCode"] == 200
        assert body_of(response) == {}

    def test_missing_action(self, dispatcher, make_event):
        response = dispatcher.handle_event(make_event(data={"id": "1"}))

        assert response["statusCode"] == 200
        assert body_of(response) == {}

    def test_empty_body(self, dispatcher, make_event):
        response = dispatcher.handle_event(make_event(raw_body=""))

        assert response["statusCode"] == 200
        assert body_of(response) == {}


class TestEnvelope:

    def test_cors_headers_on_every_response(self, dispatcher, make_event):
        for event in (make_event(action="ITEM_LIST"), make_event(action="NOPE"), make_event(raw_body="{")):
            headers = dispatcher.handle_event(event)["headers"]
            assert headers["Access-Control-Allow-Origin"] == "*"
            assert headers["Access-Control-Allow-Headers"] == "*"
            assert headers["Access-Control-Allow-Methods"] == "*"

    @pytest.mark.parametrize("raw_body", ["{not json", "[1, 2]", '"INIT"', '{"action": "ADD_ORDER", "data": [1]}'])
    def test_malformed_body_is_bad_request(self, dispatcher, make_event, raw_body):
        response = dispatcher.handle_event(make_event(raw_body=raw_body))

        assert response["statusCode"] == 400
        body = body_of(response)
        assert body["success"] is False
        assert body["error"] == "MALFORMED_REQUEST"

    def test_base64_body(self, dispatcher, make_event):
        response = dispatcher.handle_event(make_event(action="ITEM_LIST", base64_encoded=True))

        assert response["statusCode"] == 200
        assert len(body_of(response)) == 3


class TestLoginAction:

    def test_admin_login(self, dispatcher, make_event, token_service, admin_password):
        response = dispatcher.handle_event(make_event(
            action="LOGIN",
            data={"userId": "admin", "password": admin_password},
        ))

        token = body_of(response)["token"]
        assert token_service.verify(token) == {"userId": "admin", "name": "Administrator", "role": "admin"}

    def test_wrong_password(self, dispatcher, make_event):
        response = dispatcher.handle_event(make_event(action="LOGIN", data={"userId": "admin", "password": "nope"}))

        assert response["statusCode"] == 200
        assert body_of(response) == {}

    def test_missing_credentials(self, dispatcher, make_event):
        response = dispatcher.handle_event(make_event(action="LOGIN"))

        assert body_of(response) == {}

    def test_non_string_user_id(self, dispatcher, make_event):
        body = body_of(dispatcher.handle_event(make_event(action="LOGIN", data={"userId": {"$ne": None}})))

        assert body["success"] is False
        assert body["error"] == "VALIDATION_ERROR"
        assert body["field_errors"][0]["field"] == "userId"


class TestOrderActions:

    def test_add_order_then_list(self, dispatcher, make_event, seeded_store):
        response = dispatcher.handle_event(make_event(
            action="ADD_ORDER",
            data={"title": "T-Shirt", "price": 10, "buyerName": "X", "buyerAddress": "Y"},
        ))
        assert body_of(response) == {"success": True}

        orders = body_of(dispatcher.handle_event(make_event(action="ORDER_LIST")))

        new_orders = [order for order in orders if order["buyerName"] == "X"]
        assert len(orders) == 4
        assert len(new_orders) == 1
        assert new_orders[0]["orderStatus"] == "OPEN"
        assert new_orders[0]["price"] == 10

    def test_decimal_prices_survive(self, dispatcher, make_event, seeded_store):
        dispatcher.handle_event(make_event(raw_body='{"action": "ADD_ORDER", "data": {"title": "Cap", "price": 19.99}}'))

        order = next(o for o in seeded_store.query_by_context(RecordContext.ORDER) if o["title"] == "Cap")
        assert order["price"] == Decimal("19.99")

    def test_complete_and_reopen(self, dispatcher, make_event, seeded_store):
        assert body_of(dispatcher.handle_event(make_event(action="COMPLETE_ORDER", data={"id": "2"}))) == {"success": True}
        assert seeded_store.get_by_key(RecordContext.ORDER, "2")["orderStatus"] == "CLOSED"

        assert body_of(dispatcher.handle_event(make_event(action="REOPEN_ORDER", data={"id": "2"}))) == {"success": True}
        assert seeded_store.get_by_key(RecordContext.ORDER, "2")["orderStatus"] == "OPEN"

    def test_complete_unknown_order(self, dispatcher, make_event, seeded_store):
        body = body_of(dispatcher.handle_event(make_event(action="COMPLETE_ORDER", data={"id": "nope"})))

        assert body["success"] is False
        assert body["error"] == "RESOURCE_NOT_FOUND"
        assert seeded_store.get_by_key(RecordContext.ORDER, "nope") is None

    @pytest.mark.parametrize("data", [None, {}, {"id": ""}, {"id": None}])
    def test_complete_requires_id(self, dispatcher, make_event, data):
        body = body_of(dispatcher.handle_event(make_event(action="COMPLETE_ORDER", data=data)))

        assert body["success"] is False
        assert body["error"] == "VALIDATION_ERROR"


class TestItemActions:

    def test_item_list(self, dispatcher, make_event):
        items = body_of(dispatcher.handle_event(make_event(action="ITEM_LIST")))

        assert sorted(item["title"] for item in items) == ["Polo-Shirt", "T-Shirt", "Tank Top"]
        assert all(item["price"] == 10 for item in items)

    def test_add_then_remove_item(self, dispatcher, make_event, seeded_store):
        response = dispatcher.handle_event(make_event(action="ADD_ITEM", data={"title": "Hoodie", "price": 30}))
        assert body_of(response) == {}

        hoodie = next(i for i in seeded_store.query_by_context(RecordContext.ITEM) if i["title"] == "Hoodie")

        response = dispatcher.handle_event(make_event(action="REMOVE_ITEM", data={"id": hoodie["id"]}))
        assert body_of(response) == {}
        assert seeded_store.get_by_key(RecordContext.ITEM, hoodie["id"]) is None

    def test_remove_missing_item(self, dispatcher, make_event):
        response = dispatcher.handle_event(make_event(action="REMOVE_ITEM", data={"id": "missing"}))

        assert response["statusCode"] == 200
        assert body_of(response) == {}


class TestInitAction:

    def test_init_reports_results(self, memory_store, token_service, make_event):
        dispatcher = Dispatcher(StorefrontServices.build(store=memory_store, token_service=token_service))

        body = body_of(dispatcher.handle_event(make_event(action="INIT")))

        assert body["success"] is True
        assert len(body["results"]) == 7
        assert len(memory_store.query_by_context(RecordContext.ITEM)) == 3


class TestFailures:

    def test_unexpected_error_is_contained(self, services, make_event):
        def broken(services, data):
            raise RuntimeError("boom")

        dispatcher = Dispatcher(services, handlers={**ACTION_HANDLERS, Action.ITEM_LIST: broken})

        response = dispatcher.handle_event(make_event(action="ITEM_LIST"))

        assert response["statusCode"] == 200
        body = body_of(response)
        assert body["success"] is False
        assert body["error"] == "INTERNAL_SERVER_ERROR"
        assert "boom" not in response["body"]


class TestProtectedActions:

    @pytest.fixture
    def guarded(self, seeded_store, token_service) -> Dispatcher:
        return Dispatcher(StorefrontServices.build(
            store=seeded_store,
            token_service=token_service,
            protected_actions=frozenset({"ADD_ITEM", "REMOVE_ITEM"}),
        ))

    def test_anonymous_caller_rejected(self, guarded, make_event, seeded_store):
        body = body_of(guarded.handle_event(make_event(action="ADD_ITEM", data={"title": "Hoodie"})))

        assert body["success"] is False
        assert body["error"] == "UNAUTHORIZED"
        assert len(seeded_store.query_by_context(RecordContext.ITEM)) == 3

    def test_invalid_token_rejected(self, guarded, make_event):
        body = body_of(guarded.handle_event(make_event(action="REMOVE_ITEM", data={"id": "1"}, token="garbage")))

        assert body["error"] == "UNAUTHORIZED"

    def test_verified_caller_allowed(self, guarded, make_event, token_service, seeded_store):
        token = token_service.issue({"userId": "admin"})

        response = guarded.handle_event(make_event(action="REMOVE_ITEM", data={"id": "1"}, token=token))

        assert body_of(response) == {}
        assert seeded_store.get_by_key(RecordContext.ITEM, "1") is None

    def test_unprotected_action_open(self, guarded, make_event):
        assert len(body_of(guarded.handle_event(make_event(action="ITEM_LIST")))) == 3


class TestDispatchRequest:

    def test_dispatch_normalized_request(self, dispatcher):
        request = ApiRequest(body={"action": "ORDER_LIST"})

        assert {order["id"] for order in dispatcher.dispatch(request)} == {"1", "2", "3"}
