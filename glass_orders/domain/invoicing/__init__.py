"""Invoicing domain - invoice PDFs for completed orders and WhatsApp delivery"""
