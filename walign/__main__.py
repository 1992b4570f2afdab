from walign.aligner import main


main()
