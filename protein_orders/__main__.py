from protein_orders.main import run

run()
