from asl3_mapp.main import main

main()
