"""
Item categorization: taxonomy, classifier, reconciler and export
"""
from shopsnap.categorization.taxonomy import (
    DEFAULT_TAXONOMY,
    StoreCategory,
    Taxonomy,
    load_taxonomy,
)
from shopsnap.categorization.classifier import categorize_items, classify
from shopsnap.categorization.reconciler import (
    ReconcileResult,
    ReconcileSignature,
    edit_item_text,
    move_to_category,
    reconcile,
    remove_item,
    route_order,
    toggle_completed,
)
from shopsnap.categorization.export import export_filename, export_list, group_by_category

__all__ = [
    'DEFAULT_TAXONOMY',
    'StoreCategory',
    'Taxonomy',
    'load_taxonomy',
    'categorize_items',
    'classify',
    'ReconcileResult',
    'ReconcileSignature',
    'edit_item_text',
    'move_to_category',
    'reconcile',
    'remove_item',
    'route_order',
    'toggle_completed',
    'export_filename',
    'export_list',
    'group_by_category',
]
