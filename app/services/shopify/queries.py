"""
GraphQL documents sent to the Shopify Admin API.

Field names and argument shapes follow the Admin API schema; the bundle tag,
page size and metafield namespace/key are passed as variables.
"""

PRODUCT_PRICE_FIELDS = """
            priceRangeV2 {
              minVariantPrice {
                amount
                currencyCode
              }
            }
"""

GET_PRODUCTS_QUERY = """
query getProducts($first: Int!, $query: String) {
  products(first: $first, query: $query) {
    edges {
      node {
        id
        title
%s
      }
    }
  }
}
""" % PRODUCT_PRICE_FIELDS

GET_BUNDLES_QUERY = """
query getBundles($first: Int!, $query: String, $namespace: String!, $key: String!) {
  products(first: $first, query: $query) {
    edges {
      node {
        id
        title
        description
        metafield(namespace: $namespace, key: $key) {
          value
        }
      }
    }
  }
}
"""

GET_PRODUCTS_BY_IDS_QUERY = """
query getProducts($ids: [ID!]!) {
  nodes(ids: $ids) {
    ... on Product {
      id
      title
%s
    }
  }
}
""" % PRODUCT_PRICE_FIELDS

CREATE_PRODUCT_MUTATION = """
mutation createProduct($input: ProductInput!, $namespace: String!, $key: String!) {
  productCreate(input: $input) {
    product {
      id
      title
      metafield(namespace: $namespace, key: $key) {
        value
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""
