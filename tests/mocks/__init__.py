from .shopify_nodes import (
    make_product_node,
    make_bundle_node,
    make_graphql_response,
    make_user_errors_payload,
)
