"""
Integracion con la Shopify Admin API (GraphQL) y el colaborador de
autenticacion que entrega un contexto admin autenticado.
"""
