"""Orders domain - order intake, pricing, status and scheduling"""
