"""Client domain - customers who book events"""
