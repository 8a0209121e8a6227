"""Event domain - bookings, schedule conflicts and the calendar"""
