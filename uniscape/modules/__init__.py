"""Core feature modules: accounts, inventory, bookings, wallets and refunds."""
