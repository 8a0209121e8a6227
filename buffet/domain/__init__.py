"""Domain layer - schemas, repositories, services and routers per entity"""
