"""Boutique de montres de luxe: panier, checkout, commandes et réconciliation des paiements."""
