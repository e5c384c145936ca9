"""
API Routes for ShopSnap Backend
- Categorization: /categories, /categorize, /reconcile, /export
- Capture: /capture/manual, /capture/image
- Shopping lists: CRUD, item edits, route view, export, prices, order online
- Stores and products
"""

import logging

from flask import Response, current_app, jsonify, request

from shopsnap.api import api_bp
from shopsnap.categorization import (
    ReconcileSignature,
    categorize_items,
    edit_item_text,
    export_filename,
    export_list,
    group_by_category,
    move_to_category,
    reconcile,
    remove_item,
    toggle_completed,
)
from shopsnap.categorization.reconciler import (
    input_fingerprint,
    output_fingerprint,
    valid_items,
)
from shopsnap.errors import NotFoundError, OCRProcessingError, ValidationError
from shopsnap.models import (
    SUPERMARKET_CHAINS,
    Product,
    ShoppingList,
    Store,
    items_from_payload,
)
from shopsnap.services.capture import fallback_items, parse_manual_entry
from shopsnap.services.ocr_service import OCRService
from shopsnap.services.pricing import (
    compare_prices,
    directions_url,
    online_services,
)
from shopsnap.storage import get_storage
from shopsnap.utils.cache import get_cache
from shopsnap.utils.helpers import clean_text, strip_html
from shopsnap.utils.rate_limiter import rate_limit
from shopsnap.utils.validators import (
    parse_bounded_float,
    validate_coordinates,
    validate_input_length,
)

logger = logging.getLogger(__name__)


# Request helpers

def _taxonomy():
    return current_app.extensions['shopsnap.taxonomy']


def _ocr_service() -> OCRService:
    service = current_app.extensions.get('shopsnap.ocr')
    if service is None:
        service = OCRService.from_config(current_app.config)
        current_app.extensions['shopsnap.ocr'] = service
    return service


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _success(data, status_code: int = 200, **extra):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status_code


def _parse_items(payload, field: str = "items") -> list:
    """
    Parse an item array from a request body.

    Malformed entries are passed through for the reconciler to drop;
    oversize lists and texts are rejected outright.
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValidationError(f"'{field}' must be a list")

    max_items = current_app.config.get("MAX_ITEMS_PER_LIST", 500)
    if len(payload) > max_items:
        raise ValidationError(f"'{field}' may hold at most {max_items} items")

    max_length = current_app.config.get("MAX_ITEM_TEXT_LENGTH", 1000)
    items = []
    for item in items_from_payload(payload):
        if isinstance(item.text, str):
            if not validate_input_length(item.text, max_length):
                raise ValidationError(f"Item text exceeds {max_length} characters")
            item = item.evolve(text=clean_text(strip_html(item.text)))
        items.append(item)
    return items


def _parse_name(value, required: bool) -> str:
    if value is None and not required:
        return None
    if not isinstance(value, str):
        raise ValidationError("'name' must be a non-empty string")
    if not validate_input_length(value, 200):
        raise ValidationError("'name' exceeds 200 characters")
    name = clean_text(strip_html(value))
    if not name:
        raise ValidationError("'name' must be a non-empty string")
    return name


def _get_list_or_404(list_id: int) -> ShoppingList:
    shopping_list = get_storage().get_shopping_list(list_id)
    if shopping_list is None:
        raise NotFoundError("Shopping list", list_id)
    return shopping_list


def _save_items(shopping_list: ShoppingList, items: list) -> ShoppingList:
    """Store edited items with a signature describing them."""
    return get_storage().update_shopping_list(shopping_list.id, {
        "items": items,
        "input_fingerprint": input_fingerprint(items),
        "output_fingerprint": output_fingerprint(items),
    })


def _signature_of(shopping_list: ShoppingList) -> ReconcileSignature:
    return ReconcileSignature(
        shopping_list.input_fingerprint, shopping_list.output_fingerprint
    )


def _text_download(text: str) -> Response:
    response = Response(text, mimetype="text/plain; charset=utf-8")
    response.headers["Content-Disposition"] = f'attachment; filename="{export_filename()}"'
    return response


# Categorization

@api_bp.route("/categories", methods=["GET"])
@rate_limit
def list_categories():
    """The aisle taxonomy in shelf-walk order."""
    taxonomy = _taxonomy()
    return _success({
        "categories": taxonomy.to_list(),
        "fallback": taxonomy.fallback.name,
    })


@api_bp.route("/categorize", methods=["POST"])
@rate_limit
def categorize_endpoint():
    """
    Classify a batch of items.

    Request Body:
        {"items": [{"id": "a", "text": "Milk"}, ...]}

    Returns:
        The valid items, in input order, with classifier categories.
    """
    data = _json_body()
    items = valid_items(_parse_items(data.get("items")))
    categorized = categorize_items(items, _taxonomy())
    return _success({"items": [item.to_dict() for item in categorized]})


@api_bp.route("/reconcile", methods=["POST"])
@rate_limit
def reconcile_endpoint():
    """
    Merge incoming items into a caller-held canonical list.

    Request Body:
        {
            "previous": [...],
            "incoming": [...],
            "signature": {"input": "...", "output": "..."}
        }

    Returns:
        items, signature, recomputed and changed flags.
    """
    data = _json_body()
    previous = valid_items(_parse_items(data.get("previous"), "previous"))
    incoming = _parse_items(data.get("incoming"), "incoming")
    signature = ReconcileSignature.from_dict(data.get("signature"))

    result = reconcile(previous, incoming, signature, _taxonomy())
    return _success(result.to_dict())


@api_bp.route("/export", methods=["POST"])
@rate_limit
def export_endpoint():
    """Plain-text rendering of posted items grouped by aisle."""
    data = _json_body()
    taxonomy = _taxonomy()
    items = valid_items(_parse_items(data.get("items")))
    unclassified = [item for item in items if item.category not in taxonomy]
    if unclassified:
        classified = {item.id: item for item in categorize_items(unclassified, taxonomy)}
        items = [classified.get(item.id, item) for item in items]
    return _text_download(export_list(items, taxonomy))


# Capture

@api_bp.route("/capture/manual", methods=["POST"])
@rate_limit
def capture_manual():
    """
    Split typed text into items.

    Request Body:
        {"text": "milk, bread\\neggs"}
    """
    data = _json_body()
    text = data.get("text")
    max_length = current_app.config.get("MAX_ITEM_TEXT_LENGTH", 1000)
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("'text' is required")
    if not validate_input_length(text, max_length * 10):
        raise ValidationError("'text' is too long")

    items = parse_manual_entry(strip_html(text))
    return _success({"items": [item.to_dict() for item in items]})


@api_bp.route("/capture/image", methods=["POST"])
@rate_limit
def capture_image():
    """
    Recognize a photographed list.

    Form Data:
        image (required): The image file

    Returns:
        Recognized items. When OCR fails and the placeholder fallback is
        enabled, a single placeholder item flagged with "fallback": true.
    """
    upload = request.files.get("image")
    if upload is None or not upload.filename:
        raise ValidationError("An 'image' file is required")

    image = upload.read()
    try:
        items = _ocr_service().process_image(
            image,
            filename=upload.filename,
            content_type=upload.mimetype or "application/octet-stream",
        )
    except OCRProcessingError as e:
        if not current_app.config.get("OCR_FALLBACK_PLACEHOLDER", True):
            raise
        logger.warning(f"OCR failed, returning placeholder item: {e.message}")
        return _success(
            {"items": [item.to_dict() for item in fallback_items()]},
            fallback=True,
            message=e.message,
        )

    return _success({"items": [item.to_dict() for item in items]}, fallback=False)


# Shopping lists

@api_bp.route("/shopping-lists", methods=["GET"])
@rate_limit
def get_shopping_lists():
    lists = get_storage().get_all_shopping_lists()
    return _success([shopping_list.to_dict() for shopping_list in lists])


@api_bp.route("/shopping-lists", methods=["POST"])
@rate_limit
def create_shopping_list():
    """
    Create a list; any initial items are reconciled into aisle order.

    Request Body:
        {"name": "Weekly shop", "items": [...]}
    """
    data = _json_body()
    name = _parse_name(data.get("name"), required=True)
    result = reconcile([], _parse_items(data.get("items")), None, _taxonomy())

    created = get_storage().create_shopping_list(ShoppingList(
        name=name,
        items=result.items,
        input_fingerprint=result.signature.input_fingerprint,
        output_fingerprint=result.signature.output_fingerprint,
    ))
    logger.info(f"Created shopping list {created.id} with {len(created.items)} items")
    return _success(created.to_dict(), 201)


@api_bp.route("/shopping-lists/<int:list_id>", methods=["GET"])
@rate_limit
def get_shopping_list(list_id: int):
    return _success(_get_list_or_404(list_id).to_dict())


@api_bp.route("/shopping-lists/<int:list_id>", methods=["PUT"])
@rate_limit
def update_shopping_list(list_id: int):
    """
    Rename a list and/or replace its items.

    Replacement items go through reconciliation, so user category
    overrides and the change signature are kept.
    """
    data = _json_body()
    shopping_list = _get_list_or_404(list_id)

    updates = {}
    name = _parse_name(data.get("name"), required=False)
    if name is not None:
        updates["name"] = name

    changed = False
    if "items" in data:
        result = reconcile(
            shopping_list.items,
            _parse_items(data.get("items")),
            _signature_of(shopping_list),
            _taxonomy(),
        )
        changed = result.changed
        updates.update({
            "items": result.items,
            "input_fingerprint": result.signature.input_fingerprint,
            "output_fingerprint": result.signature.output_fingerprint,
        })

    updated = get_storage().update_shopping_list(list_id, updates)
    return _success(updated.to_dict(), changed=changed)


@api_bp.route("/shopping-lists/<int:list_id>", methods=["DELETE"])
@rate_limit
def delete_shopping_list(list_id: int):
    if not get_storage().delete_shopping_list(list_id):
        raise NotFoundError("Shopping list", list_id)
    get_cache().delete_prefix(f"prices:{list_id}:")
    return "", 204


@api_bp.route("/shopping-lists/<int:list_id>/items", methods=["POST"])
@rate_limit
def submit_items(list_id: int):
    """
    Reconcile a captured or edited batch into the stored list.

    Request Body:
        {"items": [...]}

    Returns:
        The stored list plus "recomputed" and "changed" flags. Submitting
        the same batch twice leaves the list untouched the second time;
        completion or user-category edits in it are still stored.
    """
    data = _json_body()
    shopping_list = _get_list_or_404(list_id)
    result = reconcile(
        shopping_list.items,
        _parse_items(data.get("items")),
        _signature_of(shopping_list),
        _taxonomy(),
    )

    if result.recomputed or result.items != shopping_list.items:
        shopping_list = get_storage().update_shopping_list(list_id, {
            "items": result.items,
            "input_fingerprint": result.signature.input_fingerprint,
            "output_fingerprint": result.signature.output_fingerprint,
        })

    return _success(
        shopping_list.to_dict(),
        recomputed=result.recomputed,
        changed=result.changed,
    )


@api_bp.route("/shopping-lists/<int:list_id>/items/<item_id>", methods=["PATCH"])
@rate_limit
def edit_item(list_id: int, item_id: str):
    """
    Edit one item.

    Request Body (all optional):
        {"text": "...", "completed": true, "category": "Dairy"}

    A category sent here is an explicit user override and survives later
    reconciliation.
    """
    data = _json_body()
    shopping_list = _get_list_or_404(list_id)
    taxonomy = _taxonomy()
    items = shopping_list.items

    try:
        if "text" in data:
            text = data["text"]
            max_length = current_app.config.get("MAX_ITEM_TEXT_LENGTH", 1000)
            if not isinstance(text, str) or not validate_input_length(text, max_length):
                raise ValidationError("'text' must be a string of limited length")
            items = edit_item_text(items, item_id, clean_text(strip_html(text)), taxonomy)

        if "completed" in data:
            if not isinstance(data["completed"], bool):
                raise ValidationError("'completed' must be a boolean")
            current = next(item for item in items if item.id == item_id)
            if current.completed != data["completed"]:
                items = toggle_completed(items, item_id)

        if "category" in data:
            items = move_to_category(items, item_id, data["category"], taxonomy)
    except (KeyError, StopIteration):
        raise NotFoundError("Item", item_id)
    except ValueError as e:
        raise ValidationError(str(e))

    updated = _save_items(shopping_list, items)
    return _success(updated.to_dict())


@api_bp.route("/shopping-lists/<int:list_id>/items/<item_id>", methods=["DELETE"])
@rate_limit
def delete_item(list_id: int, item_id: str):
    shopping_list = _get_list_or_404(list_id)
    try:
        items = remove_item(shopping_list.items, item_id)
    except KeyError:
        raise NotFoundError("Item", item_id)
    updated = _save_items(shopping_list, items)
    return _success(updated.to_dict())


@api_bp.route("/shopping-lists/<int:list_id>/route", methods=["GET"])
@rate_limit
def get_route(list_id: int):
    """Items grouped by aisle in shelf-walk order."""
    shopping_list = _get_list_or_404(list_id)
    groups = group_by_category(shopping_list.items, _taxonomy())
    return _success({
        "list_id": list_id,
        "total": len(shopping_list.items),
        "completed": sum(1 for item in shopping_list.items if item.completed),
        "groups": [
            {
                **group["category"].to_dict(),
                "count": group["count"],
                "completed": group["completed"],
                "items": [item.to_dict() for item in group["items"]],
            }
            for group in groups
        ],
    })


@api_bp.route("/shopping-lists/<int:list_id>/export", methods=["GET"])
@rate_limit
def export_shopping_list(list_id: int):
    shopping_list = _get_list_or_404(list_id)
    return _text_download(export_list(shopping_list.items, _taxonomy()))


@api_bp.route("/shopping-lists/<int:list_id>/prices", methods=["GET"])
@rate_limit
def get_prices(list_id: int):
    """
    Compare the list's cost across supermarket chains.

    Query Parameters:
        chains (optional): Comma-separated chain keys, default all
    """
    shopping_list = _get_list_or_404(list_id)

    chains_param = request.args.get("chains", "")
    chains = [c.strip() for c in chains_param.split(",") if c.strip()] or list(SUPERMARKET_CHAINS)
    unknown = [chain for chain in chains if chain not in SUPERMARKET_CHAINS]
    if unknown:
        raise ValidationError(f"Unknown chains: {', '.join(unknown)}")

    cache = get_cache()
    cache_key = (
        f"prices:{list_id}:{output_fingerprint(shopping_list.items)}:{','.join(chains)}"
    )
    cached_result = cache.get(cache_key)
    if cached_result is not None:
        logger.info(f"Cache hit for prices of list {list_id}")
        return _success(cached_result, cached=True)

    result = compare_prices(shopping_list.items, get_storage().get_all_products(), chains)
    cache.set(cache_key, result)
    return _success(result, cached=False)


@api_bp.route("/shopping-lists/<int:list_id>/order-online", methods=["GET"])
@rate_limit
def get_order_online(list_id: int):
    """Online ordering services with estimated totals and redirect URLs."""
    shopping_list = _get_list_or_404(list_id)
    return _success({"services": online_services(shopping_list.items)})


# Stores

@api_bp.route("/stores", methods=["GET"])
@rate_limit
def get_stores():
    """
    All stores, or those near a point.

    Query Parameters:
        lat, lng (optional): Search origin
        radius (optional): Search radius in km
    """
    storage = get_storage()
    lat = request.args.get("lat")
    lng = request.args.get("lng")

    if lat is None and lng is None:
        stores = [
            dict(store.to_dict(), directions_url=directions_url(store))
            for store in storage.get_all_stores()
        ]
        return _success(stores)

    if not validate_coordinates(lat, lng):
        raise ValidationError("'lat' and 'lng' must be valid coordinates")

    max_radius = current_app.config.get("MAX_SEARCH_RADIUS_KM", 100.0)
    radius = request.args.get("radius", current_app.config.get("DEFAULT_SEARCH_RADIUS_KM", 5.0))
    radius_km = parse_bounded_float(radius, 0.0, max_radius)
    if radius_km is None:
        raise ValidationError(f"'radius' must be between 0 and {max_radius} km")

    nearby = storage.get_stores_by_location(float(lat), float(lng), radius_km)
    return _success([
        dict(
            store.to_dict(),
            distance_km=round(distance, 2),
            directions_url=directions_url(store),
        )
        for store, distance in nearby
    ])


@api_bp.route("/stores", methods=["POST"])
@rate_limit
def create_store():
    data = _json_body()
    for field in ("name", "chain", "address", "postcode", "opening_hours"):
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"'{field}' is required")
    if not validate_coordinates(data.get("latitude"), data.get("longitude")):
        raise ValidationError("'latitude' and 'longitude' must be valid coordinates")

    store = Store.from_dict({
        **data,
        **{k: strip_html(data[k]) for k in ("name", "chain", "address", "postcode")},
    })
    created = get_storage().create_store(store)
    return _success(created.to_dict(), 201)


# Products

@api_bp.route("/products", methods=["GET"])
@rate_limit
def get_products():
    """
    Query Parameters:
        search (optional): Case-insensitive name substring
    """
    storage = get_storage()
    search = request.args.get("search", "").strip()
    products = storage.search_products(search) if search else storage.get_all_products()
    return _success([product.to_dict() for product in products])


@api_bp.route("/products/<name>", methods=["GET"])
@rate_limit
def get_product_by_name(name: str):
    product = get_storage().get_product_by_name(name)
    if product is None:
        raise NotFoundError("Product", name)
    return _success(product.to_dict())


@api_bp.route("/products", methods=["POST"])
@rate_limit
def create_product():
    data = _json_body()
    name = _parse_name(data.get("name"), required=True)
    category = data.get("category")
    if category not in _taxonomy():
        raise ValidationError("'category' must be one of the store categories")

    try:
        product = Product.from_dict({**data, "name": name})
    except (TypeError, ValueError):
        raise ValidationError("Prices must be numbers")
    if any(price is not None and price < 0 for price in product.prices.values()):
        raise ValidationError("Prices must not be negative")

    created = get_storage().create_product(product)
    return _success(created.to_dict(), 201)
